"""Unit tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging
import sys

from cloud_tasks_world.logging import JsonFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="cloud_tasks_world.dispatcher",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Dispatched task",
        args=None,
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_queue_fields_are_top_level() -> None:
    line = JsonFormatter().format(
        _record(prefix="__wkf_step_", queue="workflow-steps", message_id="msg_1")
    )
    entry = json.loads(line)

    assert entry["level"] == "INFO"
    assert entry["logger"] == "cloud_tasks_world.dispatcher"
    assert entry["message"] == "Dispatched task"
    assert entry["prefix"] == "__wkf_step_"
    assert entry["queue"] == "workflow-steps"
    assert entry["message_id"] == "msg_1"
    assert "extra" not in entry


def test_other_extra_fields_are_nested() -> None:
    entry = json.loads(JsonFormatter().format(_record(message_id="msg_1", idempotency_key="k1")))

    assert entry["message_id"] == "msg_1"
    assert entry["extra"] == {"idempotency_key": "k1"}


def test_plain_record_has_no_extra() -> None:
    entry = json.loads(JsonFormatter().format(_record()))
    assert "extra" not in entry


def test_exception_is_rendered() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    entry = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in entry["exception"]
