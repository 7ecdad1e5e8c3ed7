from __future__ import annotations

import json
import logging

from activerecord.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_PARAMS = 2


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="activerecord.sql.builder",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record("Prepared statement")
    record.statement = "Select"
    record.params = EXPECTED_PARAMS

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "activerecord.sql.builder"
    assert payload["message"] == "Prepared statement"
    assert payload["statement"] == "Select"
    assert payload["params"] == EXPECTED_PARAMS
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"table": "users"}

    payload = json.loads(_json_formatter(record))

    assert payload["table"] == "users"


def test_json_formatter_stringifies_unknown_values() -> None:
    record = _record()
    record.primary_key = ("user_id", "team")
    record.table = object()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["primary_key"] == ["user_id", "team"]
    assert isinstance(payload["table"], str)


def test_configure_logging_keeps_existing_loggers() -> None:
    existing = logging.getLogger("activerecord.record.abstract")

    configure_logging(level="WARNING", json_logs=True)

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    assert not existing.disabled
