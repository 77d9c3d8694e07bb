"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
from google.cloud import tasks_v2

from cloud_tasks_world.cloud_tasks.client import CloudTasksGateway
from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.engine import EmbeddedWorld, QueueHandler
from cloud_tasks_world.models import QueueMessage
from cloud_tasks_world.naming import QueuePrefix
from cloud_tasks_world.world import CloudTasksQueue

PROJECT = "test-project"
LOCATION = "us-central1"


class RecordingWorld(EmbeddedWorld):
    """Embedded world that records what it is asked to do."""

    def __init__(self) -> None:
        self.queued: list[tuple[str, QueueMessage, str | None]] = []
        self.handlers: dict[QueuePrefix, QueueHandler] = {}

    def queue(
        self,
        queue_name: str,
        message: QueueMessage,
        *,
        idempotency_key: str | None = None,
    ) -> Any:
        self.queued.append((queue_name, message, idempotency_key))
        return {"messageId": "embedded"}

    def create_queue_handler(self, prefix: QueuePrefix, handler: QueueHandler) -> Any:
        self.handlers[prefix] = handler
        return handler


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's environment and .env out of the tests."""

    for name in (
        "GCP_PROJECT_ID",
        "GCP_LOCATION",
        "WORLD_QUEUE_PREFIX",
        "WORLD_QUEUE_CONCURRENCY",
        "TASK_HANDLER_URL",
        "WORLD_DEPLOYMENT_ID",
        "WORLD_CACHE_PROVISIONED_QUEUES",
        "LOG_LEVEL",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> WorldSettings:
    return WorldSettings(
        gcp_project_id=PROJECT,
        gcp_location=LOCATION,
        task_handler_url="https://bridge.example.com/api/tasks",
    )


@pytest.fixture
def tasks_client() -> Mock:
    """A CloudTasksClient whose queues already exist and whose tasks get server ids."""

    client = Mock(spec=tasks_v2.CloudTasksClient)
    client.get_queue.return_value = tasks_v2.Queue()
    client.create_queue.return_value = tasks_v2.Queue()
    client.create_task.return_value = tasks_v2.Task(
        name=f"projects/{PROJECT}/locations/{LOCATION}/queues/workflow-steps/tasks/1234"
    )
    return client


@pytest.fixture
def gateway(tasks_client: Mock) -> CloudTasksGateway:
    return CloudTasksGateway(project_id=PROJECT, location=LOCATION, client=tasks_client)


@pytest.fixture
def embedded_world() -> RecordingWorld:
    return RecordingWorld()


@pytest.fixture
def world(
    settings: WorldSettings, gateway: CloudTasksGateway, embedded_world: RecordingWorld
) -> CloudTasksQueue:
    return CloudTasksQueue(settings=settings, gateway=gateway, embedded_world=embedded_world)
