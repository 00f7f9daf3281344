"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import structlog

from kube_inspect.logging.config import (
    _HANDLER_ATTR,
    LOG_FILE_NAME,
    RETENTION_DAYS,
    _cleanup_old_logs,
    _setup_file_logging,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Any:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    urllib3_level = logging.getLogger("urllib3").level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("urllib3").setLevel(urllib3_level)
    structlog.reset_defaults()


def installed_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_ATTR, False)]


def console_handlers() -> list[logging.Handler]:
    return [h for h in installed_handlers() if not isinstance(h, RotatingFileHandler)]


def age_file(path: Path, days: int) -> None:
    old_time = (datetime.now() - timedelta(days=days)).timestamp()
    os.utime(path, (old_time, old_time))


@pytest.mark.unit
class TestCleanupOldLogs:
    """Tests for _cleanup_old_logs function."""

    def test_returns_early_when_log_dir_missing(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should return early if LOG_DIR doesn't exist."""
        non_existent = tmp_path / "nonexistent"
        with patch("kube_inspect.logging.config.LOG_DIR", non_existent):
            # Should not raise
            _cleanup_old_logs()

    def test_deletes_old_log_files(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should delete log files older than RETENTION_DAYS."""
        log_file = tmp_path / f"{LOG_FILE_NAME}.1"
        log_file.write_text("old log data")
        age_file(log_file, RETENTION_DAYS + 5)

        with patch("kube_inspect.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert not log_file.exists()

    def test_keeps_recent_log_files(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should keep log files newer than RETENTION_DAYS."""
        log_file = tmp_path / LOG_FILE_NAME
        log_file.write_text("recent log data")

        with patch("kube_inspect.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert log_file.exists()

    def test_keeps_unrelated_files(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should only touch its own log files."""
        other = tmp_path / "other.txt"
        other.write_text("keep me")
        age_file(other, RETENTION_DAYS + 5)

        with patch("kube_inspect.logging.config.LOG_DIR", tmp_path):
            _cleanup_old_logs()

        assert other.exists()

    def test_ignores_os_errors(self, tmp_path: Path) -> None:
        """_cleanup_old_logs should handle OSError gracefully."""
        log_file = tmp_path / f"{LOG_FILE_NAME}.1"
        log_file.write_text("data")
        age_file(log_file, RETENTION_DAYS + 5)

        with (
            patch("kube_inspect.logging.config.LOG_DIR", tmp_path),
            patch.object(Path, "unlink", side_effect=OSError("permission denied")),
        ):
            # Should not raise despite OSError
            _cleanup_old_logs()


@pytest.mark.unit
class TestSetupFileLogging:
    """Tests for _setup_file_logging function."""

    def test_creates_log_directory_and_handler(self, tmp_path: Path) -> None:
        """_setup_file_logging should create log dir and add a file handler."""
        log_dir = tmp_path / "logs"

        with (
            patch("kube_inspect.logging.config.LOG_DIR", log_dir),
            patch("kube_inspect.logging.config._cleanup_old_logs") as mock_cleanup,
        ):
            _setup_file_logging([])

        assert log_dir.exists()
        mock_cleanup.assert_called_once()
        handlers = installed_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert Path(handlers[0].baseFilename) == log_dir / LOG_FILE_NAME

    def test_file_receives_json(self, tmp_path: Path) -> None:
        """Records logged through structlog land in the file as JSON."""
        with patch("kube_inspect.logging.config.LOG_DIR", tmp_path):
            configure_logging(debug=True, console=False)
            get_logger("test").info("something_happened", pods=3)

        for handler in installed_handlers():
            handler.flush()
        content = (tmp_path / LOG_FILE_NAME).read_text()
        assert '"event": "something_happened"' in content
        assert '"pods": 3' in content


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize(
        ("kwargs", "level"),
        [
            ({}, logging.WARNING),
            ({"verbose": True}, logging.INFO),
            ({"debug": True}, logging.DEBUG),
            ({"verbose": True, "debug": True}, logging.DEBUG),
        ],
    )
    def test_console_level(self, kwargs: dict[str, bool], level: int) -> None:
        """The console handler level follows verbose/debug."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging(**kwargs)

        handlers = console_handlers()
        assert len(handlers) == 1
        assert handlers[0].level == level

    def test_console_writes_to_stderr(self) -> None:
        """Console logs go to stderr, never stdout."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging()

        handler = console_handlers()[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_console_disabled(self) -> None:
        """console=False installs no console handler."""
        with patch("kube_inspect.logging.config._setup_file_logging") as mock_file:
            configure_logging(console=False)

        assert console_handlers() == []
        mock_file.assert_called_once()

    def test_json_output_uses_json_renderer(self) -> None:
        """configure_logging with json_output=True should use JSONRenderer."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging(json_output=True)

        assert len(console_handlers()) == 1

    def test_reconfigure_replaces_handlers(self) -> None:
        """Calling configure_logging twice keeps a single console handler."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging()
            configure_logging(verbose=True)

        handlers = console_handlers()
        assert len(handlers) == 1
        assert handlers[0].level == logging.INFO

    def test_urllib3_quiet_unless_debug(self) -> None:
        """urllib3 request logging is only on in debug mode."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging(verbose=True)
            assert logging.getLogger("urllib3").level == logging.WARNING

            configure_logging(debug=True)
            assert logging.getLogger("urllib3").level == logging.DEBUG


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_bound_logger(self) -> None:
        """get_logger should return a structlog logger."""
        logger = get_logger("test")
        assert logger is not None

    def test_binds_initial_context(self) -> None:
        """get_logger should bind initial context when provided."""
        with patch("kube_inspect.logging.config._setup_file_logging"):
            configure_logging(console=False)
        logger = get_logger("test", component="store", resource_type="Pods")
        assert logger._context == {"component": "store", "resource_type": "Pods"}  # type: ignore[attr-defined]

    def test_returns_logger_without_context(self) -> None:
        """get_logger should work without initial context."""
        logger = get_logger("test")
        assert logger is not None
