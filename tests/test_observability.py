"""
Tests for logging setup — console stream, append-only file, fallback.
"""

import logging
from pathlib import Path

import pytest

from devbootstrap.core.observability.logging_config import _parse_level, setup_logging


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("WARNING") == logging.WARNING

    def test_fallbacks(self):
        assert _parse_level(None, default=logging.ERROR) == logging.ERROR
        assert _parse_level("loud", default=logging.INFO) == logging.INFO


class TestSetupLogging:
    def test_console_is_stdout_message_only(self, capsys: pytest.CaptureFixture):
        setup_logging(level="INFO")
        logging.getLogger("devbootstrap.test").info("✓ git already installed")
        out = capsys.readouterr()
        assert out.out == "✓ git already installed\n"
        assert out.err == ""

    def test_debug_console_matches_file_format(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        log = tmp_path / "install.log"
        setup_logging(level="DEBUG", log_file=log)
        logging.getLogger("devbootstrap.test").debug("PATH += /opt/go/bin")
        for handler in logging.getLogger().handlers:
            handler.flush()

        console = capsys.readouterr().out.strip()
        logged = log.read_text().strip()
        # Same layout; only the date part of the timestamp differs
        assert console.split(" ", 1)[1] == logged.split(" ", 2)[2]
        assert "DEBUG devbootstrap.test:" in console
        assert console.endswith("— PATH += /opt/go/bin")

    def test_file_gets_debug_lines(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        log = tmp_path / "logs" / "install.log"
        active = setup_logging(level="INFO", log_file=log)
        assert active == log

        logger = logging.getLogger("devbootstrap.test")
        logger.debug("Executing: ['brew', 'install', 'go']")
        logger.info("Running: brew install go")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log.read_text()
        assert "Executing: " in text
        assert "Running: brew install go" in text
        assert "Executing: " not in capsys.readouterr().out

    def test_file_is_appended(self, tmp_path: Path):
        log = tmp_path / "install.log"
        log.write_text("previous run\n")
        setup_logging(level="INFO", log_file=log)
        logging.getLogger("devbootstrap.test").info("this run")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log.read_text().splitlines()
        assert lines[0] == "previous run"
        assert lines[-1].endswith("this run")

    def test_file_level_override(self, tmp_path: Path):
        log = tmp_path / "install.log"
        setup_logging(level="INFO", log_file=log, log_file_level="WARNING")
        logger = logging.getLogger("devbootstrap.test")
        logger.info("not in file")
        logger.warning("in file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        text = log.read_text()
        assert "in file" in text
        assert "not in file" not in text

    def test_unwritable_file_falls_back(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        active = setup_logging(level="INFO", log_file=blocker / "install.log")

        assert active is None
        logging.getLogger("devbootstrap.test").info("still visible")
        out = capsys.readouterr().out
        assert out.count("Cannot write log file") == 1
        assert "still visible" in out

    def test_reconfigure_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="DEBUG")
        assert len(logging.getLogger().handlers) == 1
