"""Error taxonomy — what can go wrong while cataloguing repositories."""

from __future__ import annotations

from pathlib import Path


class GitProjectsError(Exception):
    """Base class for all gitprojects errors."""


# ── Caller configuration ────────────────────────────────────────────────

class ConfigurationError(GitProjectsError):
    """Invalid configuration supplied by the caller. Raised before any I/O."""


class InvalidSortKeyError(ConfigurationError):
    def __init__(self, key: str, choices: list[str]) -> None:
        self.key = key
        self.choices = choices
        super().__init__(f"Unknown sort key: {key!r} (choose from {', '.join(choices)})")


# ── Per-root failures ───────────────────────────────────────────────────

class PathError(GitProjectsError):
    """A scan root that cannot be walked. Collected per root, never raised out of a scan."""

    reason = "invalid path"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"{self.reason}: {self.path}")


class PathNotFoundError(PathError):
    reason = "Path does not exist"


class NotADirectoryPathError(PathError):
    reason = "Path is not a directory"


# ── Repository metadata ─────────────────────────────────────────────────

class MetadataError(GitProjectsError):
    """Repository metadata exists but cannot be read or parsed."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"Unreadable repository metadata at {self.path}: {message}")
