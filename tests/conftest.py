"""Shared test fixtures for gitprojects."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Iterator, Optional

import pytest
import structlog


@pytest.fixture(autouse=True)
def git_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> SimpleNamespace:
    """Point git's global and system config at empty throwaway files."""
    home = tmp_path_factory.mktemp("home")
    global_config = home / ".gitconfig"
    system_config = home / "system-gitconfig"
    global_config.write_text("")
    system_config.write_text("")

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_SYSTEM", str(system_config))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GIT_CONFIG_NOSYSTEM", raising=False)
    return SimpleNamespace(home=home, global_config=global_config, system_config=system_config)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers bound to a finished test's captured streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger("gitprojects").setLevel(logging.NOTSET)


@pytest.fixture
def make_repo() -> Callable[..., Path]:
    """Factory for repositories made by hand: a ``.git`` directory plus an optional config file."""

    def _make(path: Path, config: Optional[str] = None, gitmodules: bool = False) -> Path:
        os.makedirs(path / ".git", exist_ok=True)
        if config is not None:
            (path / ".git" / "config").write_text(config)
        if gitmodules:
            (path / ".gitmodules").write_text('[submodule "lib"]\n\tpath = lib\n\turl = ../lib.git\n')
        return path

    return _make


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a real repository with git init and an origin remote."""
    repo = tmp_path / "real-repo"
    subprocess.run(["git", "init", str(repo)], capture_output=True, check=True)
    subprocess.run(
        ["git", "-C", str(repo), "remote", "add", "origin", "git@github.com:octocat/real-repo.git"],
        capture_output=True,
        check=True,
    )
    return repo
