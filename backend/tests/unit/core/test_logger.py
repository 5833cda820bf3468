"""Unit tests for the JSON log formatter and request correlation."""

from __future__ import annotations

import json
import logging
import sys

from auth_api.core.logger import REQUEST_ID_HEADER, JSONFormatter


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("auth_api.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_record_as_single_line_json():
    line = JSONFormatter().format(_record("hello", request_id="abc", user_id="u-1", ignored="x"))
    payload = json.loads(line)

    assert "\n" not in line
    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["name"] == "auth_api.test"
    assert payload["request_id"] == "abc"
    assert payload["user_id"] == "u-1"
    assert "ignored" not in payload


def test_includes_exception_text():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "auth_api.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )
    payload = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc_info"]


def test_request_id_is_echoed_from_header(client):
    resp = client.get("/api/v1/health", headers={REQUEST_ID_HEADER: "req-123"})
    assert resp.headers[REQUEST_ID_HEADER] == "req-123"


def test_request_id_is_generated_per_request(client):
    first = client.get("/api/v1/health").headers[REQUEST_ID_HEADER]
    second = client.get("/api/v1/health").headers[REQUEST_ID_HEADER]
    assert first and second
    assert first != second


def test_unsafe_inbound_request_id_is_replaced(client):
    forged = 'abc" {"level":"CRITICAL"}'
    resp = client.get("/api/v1/health", headers={"X-Correlation-ID": forged})
    assert resp.headers[REQUEST_ID_HEADER] != forged


def test_correlation_header_is_accepted(client):
    resp = client.get("/api/v1/health", headers={"X-Correlation-ID": "corr-42"})
    assert resp.headers[REQUEST_ID_HEADER] == "corr-42"
