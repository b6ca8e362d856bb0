"""Git metadata access — subprocess-based reads of repository and user config."""

from __future__ import annotations

import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gitprojects.errors import MetadataError
from gitprojects.logging import get_logger
from gitprojects.models import ConfigScope, Identity

logger = get_logger(__name__)

MARKER = ".git"
SUBMODULE_DESCRIPTOR = ".gitmodules"
GIT_TIMEOUT = 10

SCOPE_ORDER = (ConfigScope.LOCAL, ConfigScope.GLOBAL, ConfigScope.SYSTEM)


@dataclass(frozen=True)
class GitHandle:
    """Where one repository keeps its metadata. Scoped to a single probe.

    ``git_dir`` is the directory the marker resolves to (``.git`` itself, or
    the target of a ``gitdir:`` file). ``common_dir`` differs from it only
    for linked worktrees and holds the shared config.
    """

    work_tree: Path
    git_dir: Path
    common_dir: Path
    is_gitfile: bool = False

    @property
    def config_path(self) -> Path:
        return self.common_dir / "config"


def _run_git(args: list[str], timeout: int = GIT_TIMEOUT) -> Optional[subprocess.CompletedProcess]:
    """Run a git command, or return None if git could not be run at all.

    Runs from the temp directory so that reads never depend on whatever
    repository the caller happens to be inside.
    """
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            errors="replace",
            cwd=tempfile.gettempdir(),
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as exc:
        logger.warning("git_unavailable", args=args, error=str(exc))
        return None


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(path, str(exc)) from exc


def open_handle(work_tree: str | Path) -> GitHandle:
    """Resolve the metadata locations of the repository rooted at work_tree.

    Raises MetadataError if the marker is missing, unreadable, or points
    nowhere.
    """
    work_tree = Path(work_tree)
    marker = work_tree / MARKER

    if marker.is_dir():
        git_dir = marker
        is_gitfile = False
    elif marker.is_file():
        # Submodules and linked worktrees: ".git" is a file holding "gitdir: <path>"
        content = _read_text(marker).strip()
        if not content.startswith("gitdir:"):
            raise MetadataError(marker, "not a gitdir pointer")
        target = Path(content[len("gitdir:"):].strip())
        git_dir = target if target.is_absolute() else work_tree / target
        is_gitfile = True
    else:
        raise MetadataError(marker, "repository marker not found")

    try:
        os.listdir(git_dir)
    except OSError as exc:
        raise MetadataError(git_dir, exc.strerror or str(exc)) from exc

    common_dir = git_dir
    commondir_file = git_dir / "commondir"
    if commondir_file.is_file():
        target = Path(_read_text(commondir_file).strip())
        common_dir = target if target.is_absolute() else git_dir / target

    return GitHandle(work_tree=work_tree, git_dir=git_dir, common_dir=common_dir, is_gitfile=is_gitfile)


def _parse_null_entries(output: str) -> list[tuple[str, str]]:
    """Split ``git config -z`` output into (key, value) pairs."""
    pairs: list[tuple[str, str]] = []
    for entry in output.split("\0"):
        if not entry:
            continue
        key, _, value = entry.partition("\n")
        pairs.append((key, value))
    return pairs


def read_remotes(handle: GitHandle) -> list[tuple[str, str]]:
    """List (remote name, url) pairs in the order the config file declares them.

    A name declared twice keeps its first position and its last URL.
    Raises MetadataError when the config file exists but is malformed or
    unreadable.
    """
    config = handle.config_path
    if not config.exists():
        return []
    if not os.access(config, os.R_OK):
        raise MetadataError(config, "permission denied")

    result = _run_git([
        "config", "--file", str(config), "--includes", "-z", "--get-regexp", r"^remote\..+\.url$",
    ])
    if result is None:
        return []
    # exit 1: no remotes configured
    if result.returncode == 1:
        return []
    if result.returncode != 0:
        raise MetadataError(config, result.stderr.strip() or f"git config exited {result.returncode}")

    remotes: dict[str, str] = {}
    for key, url in _parse_null_entries(result.stdout):
        name = key[len("remote."):-len(".url")]
        remotes[name] = url
    return list(remotes.items())


def _scope_args(scope: ConfigScope, handle: Optional[GitHandle]) -> Optional[list[str]]:
    if scope is ConfigScope.LOCAL:
        if handle is None or not handle.config_path.is_file():
            return None
        return ["--file", str(handle.config_path), "--includes"]
    return [f"--{scope.value}"]


def read_identity(scope: ConfigScope, handle: Optional[GitHandle] = None) -> tuple[Optional[str], Optional[str]]:
    """Read (user.name, user.email) as defined by one scope alone.

    A scope whose source is missing or unreadable defines nothing. Empty
    values count as undefined.
    """
    args = _scope_args(scope, handle)
    if args is None:
        return None, None

    result = _run_git(["config", *args, "-z", "--get-regexp", r"^user\.(name|email)$"])
    if result is None or result.returncode != 0:
        if result is not None and result.returncode != 1:
            logger.debug("config_scope_unreadable", scope=scope.value, error=result.stderr.strip())
        return None, None

    values: dict[str, str] = {}
    for key, value in _parse_null_entries(result.stdout):
        values[key.lower()] = value
    return values.get("user.name") or None, values.get("user.email") or None


def resolve_identity(handle: Optional[GitHandle] = None) -> Optional[Identity]:
    """Resolve the effective identity by precedence local > global > system.

    The first scope that defines either user.name or user.email supplies
    both fields as a pair. Fields are never merged across scopes, so a
    local email is not combined with a global name.
    """
    for scope in SCOPE_ORDER:
        name, email = read_identity(scope, handle)
        if name is not None or email is not None:
            return Identity(user_name=name, user_email=email, scope=scope)
    return None
