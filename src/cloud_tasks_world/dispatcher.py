"""Enqueue path: logical queue name + message -> Cloud Tasks push task."""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Mapping
from typing import Any

from google.api_core.exceptions import AlreadyExists, GoogleAPICallError
from pydantic import ValidationError

from cloud_tasks_world.cloud_tasks.client import JSON_HEADERS, CloudTasksGateway
from cloud_tasks_world.cloud_tasks.provisioner import QueueProvisioner
from cloud_tasks_world.codec import MessageCodec
from cloud_tasks_world.errors import DispatchError, InvalidMessage
from cloud_tasks_world.ids import MonotonicUlid, new_message_id
from cloud_tasks_world.models import DeliveryEnvelope, DispatchResult, QueueMessage
from cloud_tasks_world.naming import QueuePrefix, parse_queue_name

logger = logging.getLogger(__name__)

_TASK_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,500}$")
HASHED_TASK_ID_PREFIX = "h-"


def task_id_for_idempotency_key(key: str) -> str:
    """Map an idempotency key to a Cloud Tasks task id.

    Keys that are already valid task ids are used verbatim. Anything else, and
    any key that already starts with ``h-``, becomes ``h-<sha256 hex digest>``.
    Verbatim ids never start with ``h-``, so two distinct keys never share a
    task id.
    """

    if _TASK_ID_PATTERN.fullmatch(key) and not key.startswith(HASHED_TASK_ID_PREFIX):
        return key
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"{HASHED_TASK_ID_PREFIX}{digest}"


class TaskDispatcher:
    """Submits messages to the physical queue serving their namespace."""

    def __init__(
        self,
        *,
        gateway: CloudTasksGateway,
        provisioner: QueueProvisioner,
        codec: MessageCodec,
        queues: Mapping[QueuePrefix, str],
        handler_url: str,
        ids: MonotonicUlid | None = None,
    ) -> None:
        self._gateway = gateway
        self._provisioner = provisioner
        self._codec = codec
        self._queues = dict(queues)
        self._handler_url = handler_url
        self._ids = ids or MonotonicUlid()

    def dispatch(
        self,
        queue_name: str,
        message: Any,
        *,
        idempotency_key: str | None = None,
    ) -> DispatchResult:
        """Dispatch ``message`` to ``queue_name``.

        With an idempotency key the task is named after it, so Cloud Tasks keeps
        at most one live task per key; a duplicate is reported as
        ``deduplicated`` rather than raised. Without a key every call creates a
        new anonymous task.

        Raises:
            InvalidQueueName: If ``queue_name`` has no recognised prefix.
            InvalidMessage: If ``message`` does not match the message schema.
            ResourceProvisionError: If the physical queue cannot be ensured.
            DispatchError: If Cloud Tasks rejects the task.
        """

        prefix, queue_id = parse_queue_name(queue_name)
        try:
            message = QueueMessage.model_validate(message)
        except ValidationError as exc:
            raise InvalidMessage(f"Invalid message for {queue_name}: {exc}") from exc

        physical = self._queues[prefix]
        self._provisioner.ensure(physical)

        idempotency_key = idempotency_key or None
        envelope = DeliveryEnvelope(
            id=queue_id,
            data=self._codec.serialize(message),
            message_id=new_message_id(self._ids),
            idempotency_key=idempotency_key,
            prefix=prefix,
        )

        task_id = task_id_for_idempotency_key(idempotency_key) if idempotency_key else None
        log_extra = {
            "prefix": prefix.value,
            "queue": physical,
            "queue_name": queue_name,
            "message_id": envelope.message_id,
        }

        try:
            task = self._gateway.create_task(
                physical,
                url=self._handler_url,
                body=envelope.to_json_bytes(),
                task_id=task_id,
                headers=JSON_HEADERS,
            )
        except AlreadyExists as exc:
            if task_id is None:
                raise DispatchError(physical, "Task submission failed") from exc
            task_name = self._gateway.task_path(physical, task_id)
            logger.info(
                "Task already exists for idempotency key",
                extra={**log_extra, "task_name": task_name},
            )
            return DispatchResult(
                message_id=envelope.message_id, task_name=task_name, deduplicated=True
            )
        except GoogleAPICallError as exc:
            raise DispatchError(physical, "Task submission failed") from exc

        if task_id is not None:
            task_name = self._gateway.task_path(physical, task_id)
        else:
            task_name = getattr(task, "name", None) or None

        logger.info("Dispatched task", extra={**log_extra, "task_name": task_name})
        return DispatchResult(message_id=envelope.message_id, task_name=task_name)
