"""Repo discovery — walk directory trees and catalogue every git repository."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional, Protocol

from gitprojects.catalog import SortKey, apply, parse_sort_key
from gitprojects.errors import NotADirectoryPathError, PathError, PathNotFoundError
from gitprojects.git import MARKER
from gitprojects.logging import get_logger
from gitprojects.models import DEFAULT_MAX_DEPTH, RepositoryRecord, ScanConfig, ScanFilter, ScanResult, ScanWarning
from gitprojects.probe import probe_repository

logger = get_logger(__name__)

DirIdentity = tuple[int, int]


class Scanner(Protocol):
    def scan(self, config: ScanConfig) -> ScanResult: ...


def _dir_identity(path: str) -> Optional[DirIdentity]:
    """(device, inode) of the directory path resolves to."""
    try:
        st = os.stat(path)
    except OSError:
        return None
    return (st.st_dev, st.st_ino)


def iter_repositories(
    root: str | Path,
    *,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    follow_symlinks: bool = False,
    visited: Optional[set[DirIdentity]] = None,
    warnings: Optional[list[ScanWarning]] = None,
) -> Iterator[Path]:
    """Yield every directory under root that holds a ``.git`` marker.

    Depth 0 is root itself. The walk never enters a ``.git`` marker but does
    keep descending through the rest of a repository, so repositories
    nested inside other repositories are found too.

    The walk goes level by level, so each directory is entered at the
    shallowest depth it can be reached from root. Within one level, paths
    made only of real directories claim an identity before paths through a
    symlink. Each (device, inode) is entered at most once per ``visited``
    set, which stops symlink cycles. Unlistable directories are skipped and
    reported through ``warnings``.
    """
    if visited is None:
        visited = set()
    if warnings is None:
        warnings = []

    root = str(root)
    root_id = _dir_identity(root)
    if root_id is None or root_id in visited:
        return
    visited.add(root_id)

    # (path, reached through a symlink)
    level: list[tuple[str, bool]] = [(root, False)]
    depth = 0
    while level:
        candidates: list[tuple[str, bool]] = []
        for path, via_link in level:
            try:
                entries = sorted(os.scandir(path), key=lambda e: e.name)
            except OSError as exc:
                warnings.append(ScanWarning(path=path, kind="unreadable", message=exc.strerror or str(exc)))
                logger.warning("directory_unreadable", path=path, error=str(exc))
                continue

            has_marker = False
            for entry in entries:
                try:
                    if entry.name == MARKER:
                        has_marker = entry.is_dir() or entry.is_file()
                        continue
                    if entry.is_symlink():
                        if follow_symlinks and entry.is_dir():
                            candidates.append((entry.path, True))
                    elif entry.is_dir(follow_symlinks=False):
                        candidates.append((entry.path, via_link))
                except OSError:
                    continue

            if has_marker:
                yield Path(path)

        if max_depth is not None and depth >= max_depth:
            break

        claimed: set[str] = set()
        for path, _ in sorted(candidates, key=lambda c: c[1]):
            ident = _dir_identity(path)
            if ident is None or ident in visited:
                continue
            visited.add(ident)
            claimed.add(path)

        level = [c for c in candidates if c[0] in claimed]
        depth += 1


def _check_root(root: Path) -> Optional[PathError]:
    if not root.exists():
        return PathNotFoundError(root)
    if not root.is_dir():
        return NotADirectoryPathError(root)
    return None


class DirectoryScanner:
    """Walks each configured root in order and probes every repository found."""

    def scan(self, config: ScanConfig) -> ScanResult:
        records: list[RepositoryRecord] = []
        warnings: list[ScanWarning] = []
        failures: list[PathError] = []
        # Repositories already emitted by an earlier root
        seen: set[DirIdentity] = set()

        for root in config.root_paths:
            error = _check_root(root)
            if error is not None:
                failures.append(error)
                warnings.append(ScanWarning(path=str(root), kind="invalid-root", message=str(error)))
                logger.warning("root_invalid", path=str(root), error=str(error))
                continue

            logger.info("scan_started", root=str(root), max_depth=config.max_depth)
            walk_warnings: list[ScanWarning] = []
            for repo_path in iter_repositories(
                root,
                max_depth=config.max_depth,
                follow_symlinks=config.follow_symlinks,
                warnings=walk_warnings,
            ):
                ident = _dir_identity(str(repo_path))
                if ident is not None:
                    if ident in seen:
                        continue
                    seen.add(ident)
                if not config.include_submodules and (repo_path / MARKER).is_file():
                    logger.debug("submodule_skipped", path=str(repo_path))
                    continue
                records.append(probe_repository(repo_path, warnings=warnings))
            warnings.extend(w for w in walk_warnings if w not in warnings)

        logger.info("scan_complete", repositories=len(records), warnings=len(warnings), failures=len(failures))
        return ScanResult(records=tuple(records), warnings=tuple(warnings), failures=tuple(failures))


def scan(
    config: ScanConfig,
    scan_filter: Optional[ScanFilter] = None,
    sort_key: str | SortKey = SortKey.NAME,
    *,
    reverse: bool = False,
    scanner: Optional[Scanner] = None,
) -> ScanResult:
    """Scan, filter and sort.

    The sort key is validated before any filesystem access, so a bad key
    raises InvalidSortKeyError without touching disk.
    """
    key = parse_sort_key(sort_key)
    result = (scanner or DirectoryScanner()).scan(config)
    return replace(result, records=tuple(apply(result.records, scan_filter, key, reverse=reverse)))
