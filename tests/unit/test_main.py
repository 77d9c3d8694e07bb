"""Unit tests for the CLI (mocked Cloud Tasks, no network)."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
from google.api_core.exceptions import NotFound, PermissionDenied

import cloud_tasks_world.main as cli
from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.world import CloudTasksQueue, create_queue

from ..conftest import RecordingWorld


@pytest.fixture
def configured(monkeypatch: pytest.MonkeyPatch, tasks_client: Mock) -> Mock:
    monkeypatch.setenv("GCP_PROJECT_ID", "test-project")
    monkeypatch.setenv("GCP_LOCATION", "us-central1")
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)

    def _create_queue(settings: WorldSettings, **kwargs: Any) -> CloudTasksQueue:
        return create_queue(settings, client=tasks_client, **kwargs)

    monkeypatch.setattr(cli, "create_queue", _create_queue)
    return tasks_client


def test_missing_configuration_exits_with_2(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["queue-paths"]) == 2
    assert "GCP_PROJECT_ID" in capsys.readouterr().err


def test_queue_paths(configured: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["queue-paths"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "__wkf_workflow_\tprojects/test-project/locations/us-central1/queues/workflow-flows",
        "__wkf_step_\tprojects/test-project/locations/us-central1/queues/workflow-steps",
    ]


def test_ensure_queues_creates_missing(configured: Mock) -> None:
    configured.get_queue.side_effect = NotFound("queue missing")

    assert cli.main(["ensure-queues"]) == 0
    assert configured.create_queue.call_count == 2


def test_ensure_queues_failure_exits_with_1(configured: Mock) -> None:
    configured.get_queue.side_effect = PermissionDenied("no access")

    assert cli.main(["ensure-queues"]) == 1


def test_enqueue_prints_message_id(configured: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        [
            "enqueue",
            "--queue",
            "__wkf_step_abc123",
            "--message",
            '{"kind": "step", "payload": {"x": 1}}',
            "--idempotency-key",
            "k1",
        ]
    )

    assert code == 0
    assert capsys.readouterr().out.strip().startswith("msg_")
    task = configured.create_task.call_args.kwargs["task"]
    assert task.name.endswith("/queues/workflow-steps/tasks/k1")


def test_enqueue_rejects_invalid_queue_name(configured: Mock) -> None:
    code = cli.main(["enqueue", "--queue", "jobs_1", "--message", "{}"])

    assert code == 2
    configured.create_task.assert_not_called()


def test_enqueue_rejects_message_outside_schema(configured: Mock) -> None:
    code = cli.main(["enqueue", "--queue", "__wkf_step_1", "--message", '{"not": "a message"}'])

    assert code == 2
    configured.create_task.assert_not_called()


def test_enqueue_rejects_invalid_json(configured: Mock) -> None:
    code = cli.main(["enqueue", "--queue", "__wkf_step_1", "--message", "{nope"])

    assert code == 2
    configured.create_task.assert_not_called()


def test_serve_runs_uvicorn_with_loaded_engine(
    configured: Mock, monkeypatch: pytest.MonkeyPatch
) -> None:
    run = Mock()
    monkeypatch.setattr(cli.uvicorn, "run", run)

    code = cli.main(["serve", "--engine", "tests.conftest:RecordingWorld", "--port", "8123"])

    assert code == 0
    run.assert_called_once()
    assert run.call_args.kwargs["port"] == 8123
    assert configured.get_queue.call_count == 2
    app = run.call_args.args[0]
    assert isinstance(app.state.world.embedded_world, RecordingWorld)
