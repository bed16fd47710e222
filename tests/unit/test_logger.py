"""Unit tests for logging infrastructure."""

import json
import logging
import sys

from src.utils.logger import JSONFormatter, RichTextFormatter, get_logger


def make_record(msg="Test message", level=logging.INFO, name="test_logger", exc_info=None, **extra):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def fresh_logger(name: str) -> None:
    if name in logging.Logger.manager.loggerDict:
        logging.getLogger(name).handlers.clear()


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        """Test that JSONFormatter produces valid JSON."""
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_includes_exception_traceback(self):
        """Test that JSONFormatter includes exception traceback when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = make_record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_includes_session_context(self):
        """Test that session_id, status and error_kind are copied when present."""
        record = make_record(session_id="ab12cd34", status="failed", error_kind="upstream")

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["session_id"] == "ab12cd34"
        assert parsed["status"] == "failed"
        assert parsed["error_kind"] == "upstream"

    def test_json_formatter_omits_missing_context(self):
        """Test that context fields are absent when not set on the record."""
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert "session_id" not in parsed
        assert "error_kind" not in parsed


class TestRichTextFormatter:
    """Test RichTextFormatter produces colored text output."""

    def test_rich_text_formatter_includes_level_and_message(self):
        output = RichTextFormatter().format(make_record("Custom message", name="my_logger"))

        assert "INFO" in output
        assert "my_logger" in output
        assert "Custom message" in output

    def test_rich_text_formatter_includes_icon_per_level(self):
        formatter = RichTextFormatter()
        for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR):
            output = formatter.format(make_record(level=level))
            assert RichTextFormatter.ICONS[logging.getLevelName(level)] in output

    def test_rich_text_formatter_prefixes_session_id(self):
        output = RichTextFormatter().format(make_record("Generated", session_id="ab12cd34"))
        assert "[ab12cd34] Generated" in output

    def test_rich_text_formatter_includes_exception_traceback(self):
        try:
            raise RuntimeError("Test error")
        except RuntimeError:
            record = make_record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        output = RichTextFormatter().format(record)
        assert "RuntimeError" in output
        assert "Test error" in output


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_returns_logger_instance(self):
        assert isinstance(get_logger("test_module"), logging.Logger)

    def test_get_logger_does_not_duplicate_handlers(self):
        """Test that repeated calls reuse the configured logger."""
        first = get_logger("test_module_2")
        second = get_logger("test_module_2")

        assert first is second
        assert len(second.handlers) == 1

    def test_get_logger_respects_log_level_env(self, monkeypatch):
        fresh_logger("test_level_logger")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        assert get_logger("test_level_logger").level == logging.DEBUG

    def test_get_logger_uses_json_formatter(self, monkeypatch):
        fresh_logger("test_json_logger")
        monkeypatch.setenv("LOG_TYPE", "json")

        test_logger = get_logger("test_json_logger")
        assert any(isinstance(h.formatter, JSONFormatter) for h in test_logger.handlers)

    def test_get_logger_defaults_to_text_formatter(self, monkeypatch):
        fresh_logger("test_default_type")
        monkeypatch.delenv("LOG_TYPE", raising=False)

        test_logger = get_logger("test_default_type")
        assert any(isinstance(h.formatter, RichTextFormatter) for h in test_logger.handlers)

    def test_explicit_arguments_override_env(self, monkeypatch):
        fresh_logger("test_explicit_args")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.setenv("LOG_TYPE", "text")

        test_logger = get_logger("test_explicit_args", level="debug", log_type="json")

        assert test_logger.level == logging.DEBUG
        assert any(isinstance(h.formatter, JSONFormatter) for h in test_logger.handlers)

    def test_invalid_log_level_defaults_to_info(self, monkeypatch):
        fresh_logger("test_invalid_level")
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        assert get_logger("test_invalid_level").level == logging.INFO


class TestModuleLevelLogger:
    """Test module-level logger instance."""

    def test_logger_is_importable(self):
        from src.utils.logger import logger as imported_logger

        assert isinstance(imported_logger, logging.Logger)
        assert imported_logger.name == "recipe_generator"
        assert len(imported_logger.handlers) > 0

    def test_gemini_sdk_logger_capped_at_warning(self):
        assert logging.getLogger("google.genai").level == logging.WARNING
