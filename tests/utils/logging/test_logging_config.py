# ABOUTME: Tests for logging configuration module
# ABOUTME: Validates dual-mode logging setup, structlog routing and third-party suppression

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from loguru import logger
from structlog.testing import capture_logs

from story_normalizer.utils.logging.config import (
    QUIET_LOGGERS,
    InterceptHandler,
    LoggingMode,
    configure_logging,
    detect_logging_mode,
    get_logging_status,
    install_quiet_defaults,
)
from story_normalizer.utils.logging.utils import (
    get_logger,
    story_context,
    with_document_context,
    with_operation_context,
)


class TestLoggingMode:
    """Test the LoggingMode constants."""

    def test_logging_mode_constants(self):
        """Test that logging mode constants are defined correctly."""
        assert LoggingMode.INTERACTIVE == "interactive"
        assert LoggingMode.PRODUCTION == "production"


class TestDetectLoggingMode:
    """Test logging mode detection logic."""

    def test_detect_mode_from_env_interactive(self):
        """Test detection of interactive mode from environment variable."""
        with patch.dict(os.environ, {"STORY_NORMALIZER_LOG_MODE": "interactive"}):
            assert detect_logging_mode() == LoggingMode.INTERACTIVE

    def test_detect_mode_from_env_production(self):
        """Test detection of production mode from environment variable."""
        with patch.dict(os.environ, {"STORY_NORMALIZER_LOG_MODE": "PRODUCTION"}):
            assert detect_logging_mode() == LoggingMode.PRODUCTION

    def test_detect_mode_from_env_invalid(self):
        """Test fallback when environment variable has invalid value."""
        with (
            patch.dict(os.environ, {"STORY_NORMALIZER_LOG_MODE": "invalid"}),
            patch("sys.stdout.isatty", return_value=True),
        ):
            assert detect_logging_mode() == LoggingMode.INTERACTIVE

    def test_detect_mode_from_tty_production(self):
        """Test detection of production mode from non-TTY."""
        with patch.dict(os.environ, {}, clear=True), patch("sys.stdout.isatty", return_value=False):
            assert detect_logging_mode() == LoggingMode.PRODUCTION


class TestConfigureLogging:
    """Test logging configuration functionality."""

    def teardown_method(self):
        """Reset stdlib, loguru and structlog state touched by configure_logging."""
        for logger_name in ["", *QUIET_LOGGERS, "py.warnings"]:
            stdlib_logger = logging.getLogger(logger_name)
            stdlib_logger.handlers.clear()
            stdlib_logger.setLevel(logging.NOTSET)

        logging.captureWarnings(False)
        logger.remove()
        structlog.reset_defaults()
        install_quiet_defaults()

    def test_configure_interactive_mode(self, tmp_path, monkeypatch):
        """Test configuration of interactive mode logging."""
        monkeypatch.chdir(tmp_path)

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO")

        assert Path("logs").exists()
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_configure_production_mode_creates_no_files(self, tmp_path, monkeypatch):
        """Test that production mode logs to a stream only."""
        monkeypatch.chdir(tmp_path)

        configure_logging(mode=LoggingMode.PRODUCTION, log_level="INFO")

        assert not Path("logs").exists()
        assert logging.getLogger("pydantic").level == logging.WARNING

    def test_configure_custom_log_level(self):
        """Test configuration with custom log level."""
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_root_logger_forwards_to_loguru(self):
        """Test that the root logger carries exactly the loguru intercept handler."""
        configure_logging(mode=LoggingMode.PRODUCTION, log_level="INFO")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], InterceptHandler)

    def test_structlog_events_reach_loguru_sink(self, tmp_path, monkeypatch):
        """Test that structlog events end up in the configured log file."""
        monkeypatch.chdir(tmp_path)
        log_file = tmp_path / "custom.log"

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="INFO", log_file=str(log_file))
        get_logger("story_normalizer.tests").info("Validated story output", beats=3)
        logger.complete()

        content = log_file.read_text(encoding="utf-8")
        assert "Validated story output" in content
        assert "beats=3" in content

    def test_structlog_level_filter(self, tmp_path, monkeypatch):
        """Test that events below the configured level are dropped."""
        monkeypatch.chdir(tmp_path)
        log_file = tmp_path / "filtered.log"

        configure_logging(mode=LoggingMode.INTERACTIVE, log_level="WARNING", log_file=str(log_file))
        get_logger("story_normalizer.tests").info("Hidden event")
        get_logger("story_normalizer.tests").warning("Visible event")
        logger.complete()

        content = log_file.read_text(encoding="utf-8")
        assert "Hidden event" not in content
        assert "Visible event" in content


class TestGetLoggingStatus:
    """Test logging status reporting."""

    def test_get_status_interactive_mode(self, tmp_path, monkeypatch):
        """Test status reporting for interactive mode."""
        monkeypatch.chdir(tmp_path)
        Path("logs").mkdir()

        with patch("story_normalizer.utils.logging.config.detect_logging_mode") as mock_detect:
            mock_detect.return_value = LoggingMode.INTERACTIVE

            status = get_logging_status()

        assert status["mode"] == LoggingMode.INTERACTIVE
        assert status["log_directory"] is not None
        assert status["log_files"]["main"].endswith("story-normalizer.log")
        assert "py.warnings" in status["third_party_suppressed"]

    def test_get_status_production_mode(self):
        """Test status reporting for production mode."""
        with patch("story_normalizer.utils.logging.config.detect_logging_mode") as mock_detect:
            mock_detect.return_value = LoggingMode.PRODUCTION

            status = get_logging_status()

        assert status["mode"] == LoggingMode.PRODUCTION
        assert status["log_files"]["main"] is None
        assert status["log_files"]["json"] is None
        assert status["log_files"]["errors"] is None


class TestQuietDefaults:
    """Test that library use stays silent until logging is configured."""

    def teardown_method(self):
        structlog.reset_defaults()
        install_quiet_defaults()

    def test_validation_prints_nothing(self, capsys):
        """Test that validating a document writes nothing to stdout or stderr."""
        from story_normalizer.core import accept_story_output

        structlog.reset_defaults()
        install_quiet_defaults()

        accept_story_output({"story": {"story_id": "t", "title": "T"}}, strict_mode=False)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_existing_configuration_kept(self):
        """Test that a structlog configuration made by the host application is not replaced."""
        structlog.reset_defaults()
        structlog.configure(logger_factory=structlog.PrintLoggerFactory())

        install_quiet_defaults()

        assert structlog.get_config()["logger_factory"].__class__ is structlog.PrintLoggerFactory


class TestLogContext:
    """Test context binding helpers."""

    def setup_method(self):
        structlog.reset_defaults()

    def teardown_method(self):
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
        install_quiet_defaults()

    def test_story_context_binds_and_unbinds(self):
        """Test that story keys are bound inside the block only, skipping None values."""
        with story_context(story="madrid", source=None):
            inside = structlog.contextvars.get_contextvars()

        assert inside == {"story": "madrid"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_document_context_binds_source(self):
        """Test that the document context binds its source and an operation id."""
        with with_document_context("story.json"):
            context = structlog.contextvars.get_contextvars()

        assert context["source"] == "story.json"
        assert len(context["operation_id"]) == 8

    def test_operation_logs_summary(self):
        """Test that the completion event carries the summarized result."""

        @with_operation_context("count_beats", summarize=lambda result: {"beats": result})
        def count_beats():
            return 3

        with capture_logs() as events:
            assert count_beats() == 3

        assert events[-1]["event"] == "Completed count_beats"
        assert events[-1]["beats"] == 3
        assert events[-1]["log_level"] == "debug"

    def test_operation_binds_context_for_nested_loggers(self):
        """Test that loggers used inside the operation see its context."""
        seen = {}

        @with_operation_context("inspect")
        def inspect_context():
            seen.update(structlog.contextvars.get_contextvars())

        inspect_context()

        assert seen["operation"] == "inspect"
        assert structlog.contextvars.get_contextvars() == {}

    def test_operation_reraises_and_logs_failure(self):
        """Test that failures are logged at error level and re-raised."""

        @with_operation_context("explode")
        def explode():
            raise ValueError("boom")

        with capture_logs() as events:
            with pytest.raises(ValueError):
                explode()

        assert events[-1]["event"] == "Failed explode"
        assert events[-1]["error_type"] == "ValueError"
