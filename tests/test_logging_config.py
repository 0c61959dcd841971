"""Tests for logging configuration module."""

from __future__ import annotations

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

from screenbounds.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_log_format,
    get_log_level,
    get_logger,
)


def make_record(
    name: str = "test",
    level: int = logging.INFO,
    msg: str = "Test message",
    args: tuple = (),
    pathname: str = "/path/to/file.py",
    lineno: int = 42,
) -> logging.LogRecord:
    """Create a log record for formatter tests."""
    return logging.LogRecord(
        name=name,
        level=level,
        pathname=pathname,
        lineno=lineno,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestGetLogLevel:
    """Tests for get_log_level function."""

    def test_default_is_info(self) -> None:
        """Default log level should be INFO."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_level() == logging.INFO

    def test_debug_level(self) -> None:
        """LOG_LEVEL=DEBUG should return logging.DEBUG."""
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
            assert get_log_level() == logging.DEBUG

    def test_warn_alias(self) -> None:
        """LOG_LEVEL=WARN should work as alias for WARNING."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARN"}):
            assert get_log_level() == logging.WARNING

    def test_case_insensitive(self) -> None:
        """Log level should be case insensitive."""
        with patch.dict(os.environ, {"LOG_LEVEL": "error"}):
            assert get_log_level() == logging.ERROR

    def test_invalid_level_defaults_to_info(self) -> None:
        """Invalid log level should default to INFO."""
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            assert get_log_level() == logging.INFO


class TestGetLogFormat:
    """Tests for get_log_format function."""

    def test_default_is_text(self) -> None:
        """Default log format should be text."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_format() == "text"

    def test_json_format_case_insensitive(self) -> None:
        """LOG_FORMAT=JSON should return json."""
        with patch.dict(os.environ, {"LOG_FORMAT": "JSON"}):
            assert get_log_format() == "json"

    def test_invalid_format_defaults_to_text(self) -> None:
        """Invalid log format should default to text."""
        with patch.dict(os.environ, {"LOG_FORMAT": "xml"}):
            assert get_log_format() == "text"


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_formats_as_valid_json(self) -> None:
        """Output should be valid JSON with the core fields."""
        data = json.loads(JSONFormatter().format(make_record(name="test.logger")))
        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert "timestamp" in data

    def test_includes_source_for_debug(self) -> None:
        """Debug logs should include source location."""
        data = json.loads(JSONFormatter().format(make_record(level=logging.DEBUG, lineno=100)))
        assert data["source"]["line"] == 100
        assert data["source"]["file"] == "/path/to/file.py"

    def test_no_source_for_info(self) -> None:
        """Info logs should not include source location."""
        data = json.loads(JSONFormatter().format(make_record()))
        assert "source" not in data

    def test_formats_message_with_args(self) -> None:
        """Message arguments should be formatted."""
        record = make_record(msg="Frame %d: published=%d", args=(7, 3))
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Frame 7: published=3"

    def test_includes_frame_extras(self) -> None:
        """Fields passed through ``extra`` should land under 'extra'."""
        record = make_record()
        record.frame = 12
        record.object_id = 3
        data = json.loads(JSONFormatter().format(record))
        assert data["extra"] == {"frame": 12, "object_id": 3}


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_shortens_logger_name(self) -> None:
        """Logger names under screenbounds should be shortened."""
        output = TextFormatter(use_colors=False).format(
            make_record(name="screenbounds.engine.orchestrator")
        )
        assert "[engine.orchestrator]" in output
        assert "screenbounds.engine" not in output

    def test_includes_source_for_debug(self) -> None:
        """Debug logs should include file:line."""
        record = make_record(level=logging.DEBUG, lineno=99)
        record.filename = "test.py"
        output = TextFormatter(use_colors=False).format(record)
        assert "test.py:99" in output

    def test_renders_extras_as_key_values(self) -> None:
        """Extras should render sorted as key=value pairs."""
        record = make_record()
        record.object_id = 2
        record.frame = 5
        output = TextFormatter(use_colors=False).format(record)
        assert "{frame=5 object_id=2}" in output


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configures_package_logger(self) -> None:
        """Should configure the screenbounds logger with a single handler."""
        configure_logging(level=logging.DEBUG, format_type="text")
        configure_logging(level=logging.DEBUG, format_type="text")
        logger = logging.getLogger("screenbounds")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_uses_json_formatter(self) -> None:
        """Should use JSON formatter when format_type is json."""
        configure_logging(level=logging.INFO, format_type="json")
        logger = logging.getLogger("screenbounds")
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reads_from_environment(self) -> None:
        """Should read level and format from environment."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING", "LOG_FORMAT": "json"}):
            configure_logging()
            logger = logging.getLogger("screenbounds")
            assert logger.level == logging.WARNING
            assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestGetLogger:
    """Tests for get_logger convenience function."""

    def test_prefixes_package_name(self) -> None:
        """Should prefix other names with screenbounds."""
        assert get_logger("my_module").name == "screenbounds.my_module"

    def test_preserves_package_prefix(self) -> None:
        """Should not double-prefix screenbounds names."""
        assert get_logger("screenbounds.server").name == "screenbounds.server"


class TestIntegration:
    """Integration tests for logging."""

    def test_json_logging_to_stream(self) -> None:
        """Verify JSON logs are written correctly."""
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(JSONFormatter())

        logger = logging.getLogger("screenbounds.test_json_integration")
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        logger.warning("JSON test message", extra={"frame": 4})

        data = json.loads(buffer.getvalue().strip())
        assert data["message"] == "JSON test message"
        assert data["level"] == "WARNING"
        assert data["extra"]["frame"] == 4
