import json
import logging

from hireperfect.platform.logging import JsonFormatter
from hireperfect.platform.request_context import attempt_context, get_attempt_id, set_request_id


def _record(msg="hello", **extra):
    record = logging.LogRecord("hireperfect.attempts", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_has_core_fields():
    payload = json.loads(JsonFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "hireperfect.attempts"
    assert payload["message"] == "hello"
    assert payload["timestamp"].endswith("Z")


def test_request_id_from_context():
    token = set_request_id("req-abc")
    try:
        payload = json.loads(JsonFormatter().format(_record()))
    finally:
        token.var.reset(token)
    assert payload["request_id"] == "req-abc"


def test_attempt_id_from_context_is_scoped():
    with attempt_context(42):
        payload = json.loads(JsonFormatter().format(_record()))
    assert payload["attempt_id"] == 42
    assert get_attempt_id() is None
    assert "attempt_id" not in json.loads(JsonFormatter().format(_record()))


def test_explicit_extra_wins_over_context():
    with attempt_context(1):
        payload = json.loads(JsonFormatter().format(_record(attempt_id=9)))
    assert payload["attempt_id"] == 9
