"""gitprojects — find the git repositories on disk and catalogue their remotes and identities."""

from gitprojects.catalog import SortKey, filter_records, sort_records
from gitprojects.models import (
    ConfigScope,
    Identity,
    RemoteUrl,
    RepositoryRecord,
    ScanConfig,
    ScanFilter,
    ScanResult,
    ScanWarning,
)
from gitprojects.probe import probe_repository
from gitprojects.scanner import DirectoryScanner, Scanner, scan
from gitprojects.urls import ParsedUrl, parse_remote_url

__version__ = "0.1.0"

__all__ = [
    "ConfigScope",
    "DirectoryScanner",
    "Identity",
    "ParsedUrl",
    "RemoteUrl",
    "RepositoryRecord",
    "ScanConfig",
    "ScanFilter",
    "ScanResult",
    "ScanWarning",
    "Scanner",
    "SortKey",
    "filter_records",
    "parse_remote_url",
    "probe_repository",
    "scan",
    "sort_records",
]
