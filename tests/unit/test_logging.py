"""Unit tests for the JSON log formatter."""

import json
import logging

from app.core.logging import CustomJsonFormatter


def test_json_record_carries_service_and_request_fields():
    formatter = CustomJsonFormatter(fmt="%(asctime)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("app.test", logging.WARNING, __file__, 1, "Primary store unavailable", None, None)
    record.client_id = "laptop"
    record.correlation_id = "req-1"

    payload = json.loads(formatter.format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "app.test"
    assert payload["client_id"] == "laptop"
    assert payload["correlation_id"] == "req-1"
    assert payload["storage_backend"] == "key_value"
    assert "user_id" not in payload
