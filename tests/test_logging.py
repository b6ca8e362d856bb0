"""Tests for logging configuration."""

import json
import logging

import structlog

from gitprojects.logging import setup_logging
from gitprojects.models import ScanConfig
from gitprojects.scanner import scan


def test_json_logs_go_to_stderr(capsys):
    setup_logging(level="INFO", json_format=True)
    structlog.get_logger("gitprojects.test").info("scan_started", root="/code")

    captured = capsys.readouterr()
    assert captured.out == ""
    line = json.loads(captured.err.strip().splitlines()[-1])
    assert line["event"] == "scan_started"
    assert line["root"] == "/code"
    assert line["level"] == "info"


def test_level_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("GITPROJECTS_LOG_LEVEL", "ERROR")
    setup_logging()
    structlog.get_logger("gitprojects.test").warning("directory_unreadable", path="/x")
    assert capsys.readouterr().err == ""


def test_library_scan_keeps_stdout_clean(tmp_path, make_repo, capsys, caplog):
    """Without setup_logging, events go to stdlib logging and never to stdout."""
    make_repo(tmp_path / "proj")
    result = scan(ScanConfig(root_paths=(tmp_path, tmp_path / "missing")))

    assert [r.name for r in result.records] == ["proj"]
    assert capsys.readouterr().out == ""
    assert [r.levelno for r in caplog.records if r.name == "gitprojects.scanner"] == [logging.WARNING]
