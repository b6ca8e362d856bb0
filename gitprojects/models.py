"""Core data model — repository records, scan configuration, and scan results."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from gitprojects.errors import ConfigurationError, PathError

DEFAULT_MAX_DEPTH = 3


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    """Omit absent optional fields so that None and "" stay distinguishable."""
    return {k: v for k, v in data.items() if v is not None}


class ConfigScope(str, Enum):
    LOCAL = "local"
    GLOBAL = "global"
    SYSTEM = "system"


@dataclass(frozen=True)
class Identity:
    """user.name / user.email pair, taken as a whole from one scope."""

    user_name: Optional[str]
    user_email: Optional[str]
    scope: ConfigScope

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "user_name": self.user_name,
            "user_email": self.user_email,
            "scope": self.scope.value,
        })


@dataclass(frozen=True)
class RemoteUrl:
    name: str
    url: str
    host: Optional[str] = None
    account: Optional[str] = None
    protocol: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.host is not None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "name": self.name,
            "url": self.url,
            "host": self.host,
            "account": self.account,
            "protocol": self.protocol,
        })


@dataclass(frozen=True)
class RepositoryRecord:
    """One discovered repository. Built once per scan, never mutated.

    ``platform_host`` and ``account`` are not stored: they are always read off
    the first remote (in declaration order) whose URL parsed.
    """

    name: str
    local_path: str
    remote_urls: tuple[RemoteUrl, ...] = ()
    effective_config: Optional[Identity] = None
    contains_submodules: bool = False
    is_valid_git_repo: bool = True
    is_submodule: bool = False
    last_modified: Optional[float] = None
    scanned_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def primary_remote(self) -> Optional[RemoteUrl]:
        for remote in self.remote_urls:
            if remote.parsed:
                return remote
        return None

    @property
    def platform_host(self) -> Optional[str]:
        remote = self.primary_remote
        return remote.host if remote else None

    @property
    def account(self) -> Optional[str]:
        remote = self.primary_remote
        return remote.account if remote else None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "name": self.name,
            "local_path": self.local_path,
            "platform_host": self.platform_host,
            "account": self.account,
            "remote_urls": [r.to_dict() for r in self.remote_urls],
            "effective_config": self.effective_config.to_dict() if self.effective_config else None,
            "contains_submodules": self.contains_submodules,
            "is_valid_git_repo": self.is_valid_git_repo,
            "is_submodule": self.is_submodule,
            "last_modified": self.last_modified,
            "scanned_at": self.scanned_at.isoformat(),
        })


@dataclass(frozen=True)
class ScanConfig:
    """Immutable input to one scan.

    Root paths are expanded, made absolute and deduplicated (first occurrence
    wins). ``max_depth=None`` means unbounded. ``locale`` is carried through
    for the presentation layer and never interpreted here.
    """

    root_paths: tuple[Path, ...] = (Path("."),)
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH
    follow_symlinks: bool = False
    include_submodules: bool = True
    locale: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.root_paths, (str, os.PathLike)):
            raise ConfigurationError("root_paths must be a sequence of paths, not a single path")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0 or None, got {self.max_depth}")

        roots: list[Path] = []
        for raw in self.root_paths:
            path = Path(os.path.abspath(os.path.expanduser(os.fspath(raw))))
            if path not in roots:
                roots.append(path)
        object.__setattr__(self, "root_paths", tuple(roots))


@dataclass(frozen=True)
class ScanFilter:
    """Optional account and platform predicates, combined with AND."""

    account: Optional[str] = None
    platform: Optional[str] = None

    @property
    def active(self) -> bool:
        return bool(self.account or self.platform)


@dataclass(frozen=True)
class ScanWarning:
    path: str
    kind: str  # "unreadable" | "invalid-root" | "corrupt"
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class ScanResult:
    records: tuple[RepositoryRecord, ...] = ()
    warnings: tuple[ScanWarning, ...] = ()
    failures: tuple[PathError, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "repositories": [r.to_dict() for r in self.records],
            "warnings": [w.to_dict() for w in self.warnings],
            "failures": [{"path": str(f.path), "message": str(f)} for f in self.failures],
        }
