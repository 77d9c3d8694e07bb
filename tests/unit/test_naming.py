"""Unit tests for queue namespace resolution."""

from __future__ import annotations

import pytest

from cloud_tasks_world.errors import InvalidQueueName
from cloud_tasks_world.naming import (
    PHYSICAL_QUEUE_SUFFIXES,
    QueuePrefix,
    build_queue_name,
    parse_queue_name,
    physical_queue_name,
    queue_table,
)


@pytest.mark.parametrize(
    "name",
    [
        "__wkf_step_abc123",
        "__wkf_workflow_run_01HZX",
        "__wkf_step_",
        "__wkf_workflow___wkf_step_nested",
    ],
)
def test_parse_then_build_returns_original_name(name: str) -> None:
    prefix, queue_id = parse_queue_name(name)
    assert build_queue_name(prefix, queue_id) == name


def test_parse_splits_prefix_and_suffix() -> None:
    assert parse_queue_name("__wkf_step_abc123") == (QueuePrefix.STEP, "abc123")
    assert parse_queue_name("__wkf_workflow_run-1") == (QueuePrefix.WORKFLOW, "run-1")


@pytest.mark.parametrize("name", ["", "abc", "__wkf_", "__wkf_other_x", "wkf_step_abc"])
def test_unrecognised_prefix_is_rejected(name: str) -> None:
    with pytest.raises(InvalidQueueName) as exc_info:
        parse_queue_name(name)
    assert exc_info.value.name == name


def test_every_prefix_has_a_physical_queue() -> None:
    assert set(PHYSICAL_QUEUE_SUFFIXES) == set(QueuePrefix)


def test_physical_queue_names_use_configured_prefix() -> None:
    assert physical_queue_name(QueuePrefix.WORKFLOW) == "workflow-flows"
    assert physical_queue_name(QueuePrefix.STEP) == "workflow-steps"
    assert physical_queue_name(QueuePrefix.STEP, queue_prefix="prod-") == "prod-steps"


def test_queue_table_maps_each_prefix_to_a_distinct_queue() -> None:
    table = queue_table("staging-")
    assert table == {
        QueuePrefix.WORKFLOW: "staging-flows",
        QueuePrefix.STEP: "staging-steps",
    }
    assert len(set(table.values())) == len(table)
