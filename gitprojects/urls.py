"""Remote URL parsing — turn any git remote syntax into (host, account, protocol)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Protocol(str, Enum):
    HTTPS = "https"
    HTTP = "http"
    SSH = "ssh"
    SCP = "scp"  # user@host:path shorthand
    GIT = "git"


@dataclass(frozen=True)
class ParsedUrl:
    host: str
    account: Optional[str]
    protocol: Protocol


SCHEMES: dict[str, Protocol] = {
    "https": Protocol.HTTPS,
    "http": Protocol.HTTP,
    "ssh": Protocol.SSH,
    "git+ssh": Protocol.SSH,
    "ssh+git": Protocol.SSH,
    "git": Protocol.GIT,
}

# Display labels for well-known hosts. Presentation only: records keep the raw host.
KNOWN_SERVICES: dict[str, str] = {
    "github.com": "GitHub",
    "gitlab.com": "GitLab",
    "bitbucket.org": "Bitbucket",
    "codeberg.org": "Codeberg",
    "sr.ht": "SourceHut",
}

_URL_RE = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://(?P<rest>.*)$")
# git only treats "host:path" as scp syntax when no slash precedes the first colon
_SCP_RE = re.compile(r"^(?:(?P<user>[^@/:]+)@)?(?P<host>\[[^\]/]+\]|[^@/:\s]+):(?P<path>.*)$")


def _split_host(netloc: str) -> str:
    """Drop userinfo and port from a URL authority."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        return hostport[1:].partition("]")[0]
    return hostport.partition(":")[0]


def _account_from_path(path: str) -> Optional[str]:
    """First path segment, after dropping a trailing slash and a .git suffix."""
    segments = [s for s in path.rstrip("/").split("/") if s]
    if not segments:
        return None
    if segments[-1].endswith(".git"):
        segments[-1] = segments[-1][: -len(".git")]
        segments = [s for s in segments if s]
    return segments[0] if segments else None


def _is_local_path(url: str) -> bool:
    if url.startswith(("/", "./", "../", "~", "\\")) or url in (".", ".."):
        return True
    # C:\repo or C:/repo
    return len(url) >= 2 and url[1] == ":" and url[0].isalpha() and (len(url) == 2 or url[2] in "/\\")


def parse_remote_url(url: str) -> Optional[ParsedUrl]:
    """Parse a remote URL into host, account and protocol.

    Recognized forms:
      https://host[:port]/account/repo[.git]
      ssh://user@host[:port]/account/repo[.git]
      git://host[:port]/account/repo[.git]
      user@host:account/repo[.git]

    Returns None for local paths, file:// URLs and anything unrecognized.
    An unparsable URL is not an error. A URL with a host but no usable path
    yields ``account=None``.
    """
    url = url.strip()
    if not url:
        return None

    m = _URL_RE.match(url)
    if m:
        protocol = SCHEMES.get(m.group("scheme").lower())
        if protocol is None:
            return None
        netloc, _, path = m.group("rest").partition("/")
        host = _split_host(netloc)
        if not host:
            return None
        path = path.split("?", 1)[0].split("#", 1)[0]
        return ParsedUrl(host=host, account=_account_from_path(path), protocol=protocol)

    if _is_local_path(url):
        return None

    m = _SCP_RE.match(url)
    if not m:
        return None
    host = m.group("host").strip("[]")
    if not host:
        return None
    return ParsedUrl(host=host, account=_account_from_path(m.group("path")), protocol=Protocol.SCP)


def hosting_service(host: Optional[str]) -> Optional[str]:
    """Display label for a well-known hosting service, or None for other hosts."""
    if not host:
        return None
    host = host.lower()
    for domain, label in KNOWN_SERVICES.items():
        if host == domain or host.endswith("." + domain):
            return label
    return None
