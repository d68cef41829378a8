"""
Unit tests for the logging utilities.

This module tests the structlog setup helpers.
"""

import json
from io import StringIO

import pytest
from structlog.testing import capture_logs

from postmeta.utils.logging import get_logger, log_with_context, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_structured_output(self):
        stream = StringIO()
        setup_logging(level="INFO", structured=True, stream=stream)

        get_logger("postmeta.test").info("document_accepted", path="a.md")

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["event"] == "document_accepted"
        assert log_data["level"] == "info"
        assert log_data["logger_name"] == "postmeta.test"
        assert log_data["path"] == "a.md"
        assert "timestamp" in log_data

    def test_console_output(self):
        stream = StringIO()
        setup_logging(level="INFO", structured=False, stream=stream)

        get_logger("postmeta.test").warning("document_rejected", path="a.md")

        output = stream.getvalue()
        assert "document_rejected" in output
        assert "path=a.md" in output
        with pytest.raises(json.JSONDecodeError):
            json.loads(output)

    def test_level_filtering(self):
        stream = StringIO()
        setup_logging(level="warning", stream=stream)

        logger = get_logger("postmeta.test")
        logger.info("hidden_event")
        logger.error("shown_event")

        output = stream.getvalue()
        assert "hidden_event" not in output
        assert "shown_event" in output

    def test_exception_info(self):
        stream = StringIO()
        setup_logging(stream=stream)

        try:
            raise ValueError("Test exception")
        except ValueError:
            get_logger("postmeta.test").error("failed", exc_info=True)

        log_data = json.loads(stream.getvalue().strip())
        assert "ValueError: Test exception" in log_data["exception"]

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(level="LOUD")


class TestGetLogger:
    def test_logger_follows_later_configuration(self):
        logger = get_logger("postmeta.test")
        stream = StringIO()
        setup_logging(stream=stream)

        logger.info("configured_after_creation")

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["event"] == "configured_after_creation"
        assert log_data["logger_name"] == "postmeta.test"


class TestLogWithContext:
    def test_extra_is_merged(self):
        logger = get_logger("postmeta.test")
        with capture_logs() as logs:
            log_with_context(logger, "INFO", "pipeline_complete", {"total": 3})

        assert logs == [
            {
                "event": "pipeline_complete",
                "log_level": "info",
                "logger_name": "postmeta.test",
                "total": 3,
            }
        ]

    def test_without_extra(self):
        logger = get_logger("postmeta.test")
        with capture_logs() as logs:
            log_with_context(logger, "debug", "starting")
        assert logs[0]["event"] == "starting"
        assert logs[0]["log_level"] == "debug"
