"""Tests for logging configuration."""

import json
import logging

from quotegen.logging_config import (
    JSONFormatter,
    SensitiveDataFilter,
    TextFormatter,
    set_request_id,
    setup_logging,
)


def make_record(msg, args=()):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestSensitiveDataFilter:
    """Tests for credential redaction."""

    def test_redacts_openrouter_key(self):
        record = make_record("using key sk-or-v1-0123456789abcdef")
        SensitiveDataFilter().filter(record)
        assert "0123456789abcdef" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()

    def test_redacts_bearer_token(self):
        record = make_record("Authorization: Bearer %s", ("secret-token-value",))
        SensitiveDataFilter().filter(record)
        assert "secret-token-value" not in record.getMessage()

    def test_leaves_plain_messages(self):
        record = make_record("Quote fetched: tag=joy")
        SensitiveDataFilter().filter(record)
        assert record.getMessage() == "Quote fetched: tag=joy"


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_includes_request_id(self):
        set_request_id("abc12345")
        data = json.loads(JSONFormatter().format(make_record("hello")))
        assert data["message"] == "hello"
        assert data["request_id"] == "abc12345"
        assert data["level"] == "INFO"


class TestTextFormatter:
    """Tests for plain text output."""

    def test_prefixes_request_id(self):
        set_request_id("abc12345")
        line = TextFormatter().format(make_record("hello"))
        assert line.endswith("INFO     [abc12345] test: hello")

    def test_no_color_codes(self):
        line = TextFormatter().format(make_record("hello"))
        assert "\033[" not in line


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_single_redacting_handler(self):
        root = setup_logging(level="DEBUG", format_type="json")
        try:
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            handler = root.handlers[0]
            assert isinstance(handler.formatter, JSONFormatter)
            assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
        finally:
            setup_logging(level="INFO", format_type="text")
