from __future__ import annotations

import json
import logging

from vault.utils.logging import _json_formatter

EXPECTED_RECORDS = 10


def _log_record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _log_record()
    record.records = EXPECTED_RECORDS
    record.record_id = "abc123"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["records"] == EXPECTED_RECORDS
    assert payload["record_id"] == "abc123"
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _log_record()
    record.extra = {"path": "backups/backup_1.json"}

    payload = json.loads(_json_formatter(record))

    assert payload["path"] == "backups/backup_1.json"


def test_json_formatter_renders_non_json_values_as_strings() -> None:
    record = _log_record()
    record.backups_dir = object()

    payload = json.loads(_json_formatter(record))

    assert payload["backups_dir"].startswith("<object object")
