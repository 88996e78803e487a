"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from famly.logging_utils import REDACTED, JsonFormatter, configure_logging


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord(
        name="famly.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


def _format(record: logging.LogRecord) -> str:
    handler = logging.getLogger().handlers[0]
    for filter_ in handler.filters:
        filter_.filter(record)
    return handler.format(record)


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-anon-key"
    configure_logging("INFO", fmt, [secret])

    formatted = _format(_record("Authorization header Bearer %s apikey=%s", "user-jwt", secret))

    assert secret not in formatted
    assert "user-jwt" not in formatted
    assert REDACTED in formatted


def test_token_fields_are_masked():
    configure_logging("INFO", "plain", [])

    formatted = _format(_record('payload {"access_token": "abc", "refresh_token": "def", "password": "hunter2"}'))

    assert "abc" not in formatted
    assert "hunter2" not in formatted


def test_json_formatter_includes_request_and_family():
    record = _record("HTTP GET /tasks")
    record.request_id = "req-1"
    record.family_id = "fam-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "HTTP GET /tasks"
    assert payload["request_id"] == "req-1"
    assert payload["family_id"] == "fam-1"
