"""Filter and sort engine — pure post-processing over scanned records."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Optional

from gitprojects.errors import InvalidSortKeyError
from gitprojects.models import RepositoryRecord, ScanFilter


class SortKey(str, Enum):
    NAME = "name"
    PATH = "path"
    PLATFORM = "platform"
    ACCOUNT = "account"
    MODIFIED = "modified"


SORT_CHOICES = [k.value for k in SortKey]


def parse_sort_key(key: str | SortKey) -> SortKey:
    """Validate a sort profile name. Unknown names are rejected, never defaulted."""
    if isinstance(key, SortKey):
        return key
    try:
        return SortKey(key)
    except ValueError:
        raise InvalidSortKeyError(str(key), SORT_CHOICES) from None


# ── Filtering ───────────────────────────────────────────────────────────

def matches(record: RepositoryRecord, scan_filter: ScanFilter) -> bool:
    """Account is an exact, case-sensitive match; platform ignores case."""
    if scan_filter.account and record.account != scan_filter.account:
        return False
    if scan_filter.platform:
        host = record.platform_host
        if host is None or host.casefold() != scan_filter.platform.casefold():
            return False
    return True


def filter_records(
    records: Iterable[RepositoryRecord],
    scan_filter: Optional[ScanFilter] = None,
) -> list[RepositoryRecord]:
    if scan_filter is None or not scan_filter.active:
        return list(records)
    return [r for r in records if matches(r, scan_filter)]


# ── Sorting ─────────────────────────────────────────────────────────────

def _none_last(value: Optional[str]) -> tuple[bool, str]:
    return (value is None, value or "")


def _host(record: RepositoryRecord) -> Optional[str]:
    host = record.platform_host
    return host.casefold() if host is not None else None


def _by_name(r: RepositoryRecord) -> Any:
    return r.name


def _by_path(r: RepositoryRecord) -> Any:
    return r.local_path


def _by_platform(r: RepositoryRecord) -> Any:
    return (_none_last(_host(r)), _none_last(r.account), r.name)


def _by_account(r: RepositoryRecord) -> Any:
    return (_none_last(r.account), _none_last(_host(r)), r.name)


def _by_modified(r: RepositoryRecord) -> Any:
    # newest first, unknown mtimes last
    return (r.last_modified is None, -(r.last_modified or 0.0), r.name)


SORT_KEYS: dict[SortKey, Callable[[RepositoryRecord], Any]] = {
    SortKey.NAME: _by_name,
    SortKey.PATH: _by_path,
    SortKey.PLATFORM: _by_platform,
    SortKey.ACCOUNT: _by_account,
    SortKey.MODIFIED: _by_modified,
}


def sort_records(
    records: Iterable[RepositoryRecord],
    key: str | SortKey = SortKey.NAME,
    *,
    reverse: bool = False,
) -> list[RepositoryRecord]:
    """Stable sort by profile. ``reverse`` flips the whole final order, tie-breaks included."""
    ordered = sorted(records, key=SORT_KEYS[parse_sort_key(key)])
    if reverse:
        ordered.reverse()
    return ordered


def apply(
    records: Iterable[RepositoryRecord],
    scan_filter: Optional[ScanFilter] = None,
    key: str | SortKey = SortKey.NAME,
    *,
    reverse: bool = False,
) -> list[RepositoryRecord]:
    """Filter, then sort."""
    return sort_records(filter_records(records, scan_filter), key, reverse=reverse)
