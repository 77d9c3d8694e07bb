"""The Cloud Tasks queue bridge.

Work is distributed through two Cloud Tasks queues:
- `<prefix>flows` for workflow jobs
- `<prefix>steps` for step jobs

`queue()` pushes a message to the matching Cloud Tasks queue. When Cloud Tasks
delivers it back over HTTP, `process_task()` decodes it and re-queues it into
the embedded world, which actually runs the workflow or step.

All collaborators (Cloud Tasks client, codec, embedded world) are injected;
`create_queue()` wires the defaults from settings.
"""

from __future__ import annotations

import logging
from typing import Any

from google.cloud import tasks_v2

from cloud_tasks_world.cloud_tasks.client import CloudTasksGateway
from cloud_tasks_world.cloud_tasks.provisioner import QueueProvisioner
from cloud_tasks_world.codec import JsonTransport, MessageCodec
from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.delivery import DeliveryHandler, RawEnvelope
from cloud_tasks_world.dispatcher import TaskDispatcher
from cloud_tasks_world.engine import EmbeddedWorld, QueueHandler
from cloud_tasks_world.ids import MonotonicUlid
from cloud_tasks_world.models import DispatchResult
from cloud_tasks_world.naming import QueuePrefix, queue_table

logger = logging.getLogger(__name__)

_NO_WORLD = "No embedded world configured; deliveries cannot be processed"


class CloudTasksQueue:
    """Owns the bridge components for one project/location."""

    def __init__(
        self,
        *,
        settings: WorldSettings,
        gateway: CloudTasksGateway,
        embedded_world: EmbeddedWorld | None = None,
        codec: MessageCodec | None = None,
        ids: MonotonicUlid | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway
        self.embedded_world = embedded_world
        self.queues: dict[QueuePrefix, str] = queue_table(settings.queue_prefix)

        codec = codec or JsonTransport()
        self.provisioner = QueueProvisioner(
            gateway=gateway,
            max_dispatches_per_second=settings.queue_concurrency,
            cache=settings.cache_provisioned_queues,
        )
        self.dispatcher = TaskDispatcher(
            gateway=gateway,
            provisioner=self.provisioner,
            codec=codec,
            queues=self.queues,
            handler_url=settings.task_handler_url,
            ids=ids,
        )
        self._delivery = (
            DeliveryHandler(codec=codec, world=embedded_world)
            if embedded_world is not None
            else None
        )

    def get_deployment_id(self) -> str:
        return self.settings.deployment_id

    def queue(
        self,
        queue_name: str,
        message: Any,
        *,
        idempotency_key: str | None = None,
    ) -> DispatchResult:
        """Dispatch a message through Cloud Tasks. See :meth:`TaskDispatcher.dispatch`."""

        return self.dispatcher.dispatch(queue_name, message, idempotency_key=idempotency_key)

    def process_task(self, payload: RawEnvelope) -> None:
        """Handle one Cloud Tasks delivery.

        Call this from the HTTP endpoint that `task_handler_url` points at; any
        exception must turn into a non-2xx response so Cloud Tasks retries.
        """

        if self._delivery is None:
            raise RuntimeError(_NO_WORLD)
        self._delivery.handle_delivery(payload)

    def create_queue_handler(self, prefix: QueuePrefix, handler: QueueHandler) -> Any:
        world = self._require_world()
        return world.create_queue_handler(prefix, handler)

    def start(self) -> None:
        """Ensure every physical queue exists."""

        for prefix, queue in self.queues.items():
            self.provisioner.ensure(queue)
            logger.info("Queue ready", extra={"prefix": prefix.value, "queue": queue})

    def close(self) -> None:
        self.gateway.close()

    def _require_world(self) -> EmbeddedWorld:
        if self.embedded_world is None:
            raise RuntimeError(_NO_WORLD)
        return self.embedded_world


def create_queue(
    settings: WorldSettings | None = None,
    *,
    embedded_world: EmbeddedWorld | None = None,
    client: tasks_v2.CloudTasksClient | None = None,
    codec: MessageCodec | None = None,
) -> CloudTasksQueue:
    """Build a :class:`CloudTasksQueue` from settings (loaded from env when omitted)."""

    settings = settings or WorldSettings()
    gateway = CloudTasksGateway(
        project_id=settings.gcp_project_id,
        location=settings.gcp_location,
        client=client,
    )
    return CloudTasksQueue(
        settings=settings,
        gateway=gateway,
        embedded_world=embedded_world,
        codec=codec,
    )
