"""Shared visual constants and helpers for gitprojects."""

from __future__ import annotations

from typing import Optional

from rich.style import Style
from rich.text import Text

from gitprojects.models import Identity, RepositoryRecord
from gitprojects.urls import hosting_service

# ── Color Palette (GitHub Dark + Neon Accents) ──────────────────────────

SURFACE = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"

CYAN = "#58a6ff"
GREEN = "#39d353"
PURPLE = "#bc8cff"
YELLOW = "#e3b341"
RED = "#f85149"

# ── Icons ───────────────────────────────────────────────────────────────

ICON_REPOS = "📦"
ICON_SUBMODULES = "🧩"
ICON_INVALID = "⚠️"

SCOPE_COLORS = {
    "local": GREEN,
    "global": CYAN,
    "system": PURPLE,
}


def platform_text(record: RepositoryRecord) -> Text:
    """host/account, with the service label when the host is a well-known one."""
    text = Text()
    host = record.platform_host
    if host is None:
        text.append("—", style=Style(color=MUTED))
        return text

    text.append(hosting_service(host) or host, style=Style(color=CYAN, bold=True))
    if record.account:
        text.append("/", style=Style(color=MUTED))
        text.append(record.account, style=Style(color=YELLOW))

    extra = len(record.remote_urls) - 1
    if extra > 0:
        text.append(f" (+{extra})", style=Style(color=MUTED))
    return text


def identity_text(identity: Optional[Identity]) -> Text:
    """Render ``name <email> [scope]``, leaving out whichever field is absent."""
    text = Text()
    if identity is None:
        text.append("—", style=Style(color=MUTED))
        return text

    if identity.user_name:
        text.append(identity.user_name)
    if identity.user_email:
        if identity.user_name:
            text.append(" ")
        text.append(f"<{identity.user_email}>", style=Style(color=MUTED))
    scope = identity.scope.value
    text.append(f" [{scope}]", style=Style(color=SCOPE_COLORS[scope]))
    return text


def flag(value: bool) -> Text:
    return Text("yes", style=Style(color=GREEN)) if value else Text("no", style=Style(color=MUTED))
