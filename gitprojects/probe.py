"""Repository probe — build a RepositoryRecord for one repository root."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from gitprojects.errors import MetadataError
from gitprojects.git import MARKER, SUBMODULE_DESCRIPTOR, open_handle, read_remotes, resolve_identity
from gitprojects.logging import get_logger
from gitprojects.models import RemoteUrl, RepositoryRecord, ScanWarning
from gitprojects.urls import parse_remote_url

logger = get_logger(__name__)


def build_remote(name: str, url: str) -> RemoteUrl:
    parsed = parse_remote_url(url)
    if parsed is None:
        return RemoteUrl(name=name, url=url)
    return RemoteUrl(
        name=name,
        url=url,
        host=parsed.host,
        account=parsed.account,
        protocol=parsed.protocol.value,
    )


def _mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def probe_repository(path: str | Path, warnings: Optional[list[ScanWarning]] = None) -> RepositoryRecord:
    """Probe the repository rooted at path.

    Never raises for what it finds on disk: corrupt or unreadable metadata
    yields a record with ``is_valid_git_repo=False`` and no remotes or
    identity, and a "corrupt" warning is appended to ``warnings``.
    """
    work_tree = Path(path)
    marker = work_tree / MARKER
    name = work_tree.name or str(work_tree)

    common = dict(
        name=name,
        local_path=str(work_tree),
        contains_submodules=(work_tree / SUBMODULE_DESCRIPTOR).exists(),
        is_submodule=marker.is_file(),
        last_modified=_mtime(marker),
    )

    try:
        handle = open_handle(work_tree)
        remotes = tuple(build_remote(n, u) for n, u in read_remotes(handle))
    except MetadataError as exc:
        logger.warning("metadata_corrupt", path=str(work_tree), error=exc.message)
        if warnings is not None:
            warnings.append(ScanWarning(path=str(work_tree), kind="corrupt", message=exc.message))
        return RepositoryRecord(is_valid_git_repo=False, **common)

    record = RepositoryRecord(
        remote_urls=remotes,
        effective_config=resolve_identity(handle),
        is_valid_git_repo=True,
        **common,
    )
    logger.debug(
        "repository_found",
        path=record.local_path,
        remotes=len(record.remote_urls),
        platform=record.platform_host,
        account=record.account,
    )
    return record
