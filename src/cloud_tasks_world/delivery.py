"""Delivery path: Cloud Tasks push body -> embedded engine enqueue.

Every failure propagates so the HTTP layer answers with a non-success status
and Cloud Tasks redelivers the task later.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from cloud_tasks_world.codec import MessageCodec
from cloud_tasks_world.engine import EmbeddedWorld
from cloud_tasks_world.errors import InvalidMessage, MalformedPayload
from cloud_tasks_world.models import DeliveryEnvelope, QueueMessage

logger = logging.getLogger(__name__)

RawEnvelope = bytes | bytearray | str | Mapping[str, Any]


def parse_envelope(raw: RawEnvelope) -> DeliveryEnvelope:
    """Validate a delivered body as a :class:`DeliveryEnvelope`.

    Raises:
        MalformedPayload: If the body is not JSON, lacks required fields, or
            names an unknown namespace prefix.
    """

    try:
        if isinstance(raw, bytes | bytearray | str):
            return DeliveryEnvelope.model_validate_json(raw)
        return DeliveryEnvelope.model_validate(raw)
    except ValidationError as exc:
        raise MalformedPayload(f"Malformed delivery payload: {exc}") from exc


class DeliveryHandler:
    """Re-enqueues delivered tasks into the embedded engine."""

    def __init__(self, *, codec: MessageCodec, world: EmbeddedWorld) -> None:
        self._codec = codec
        self._world = world

    def decode_message(self, envelope: DeliveryEnvelope) -> QueueMessage:
        """Deserialize and schema-check the envelope body.

        Raises:
            InvalidMessage: If the body cannot be decoded or fails validation.
        """

        try:
            body = self._codec.deserialize([envelope.data.encode("utf-8")])
            return QueueMessage.model_validate(body)
        except (ValidationError, ValueError) as exc:
            raise InvalidMessage(
                f"Invalid message {envelope.message_id} for {envelope.queue_name}: {exc}"
            ) from exc

    def handle_delivery(self, raw: RawEnvelope) -> None:
        envelope = parse_envelope(raw)
        message = self.decode_message(envelope)
        queue_name = envelope.queue_name

        self._world.queue(queue_name, message, idempotency_key=envelope.idempotency_key)
        logger.info(
            "Delivered task to embedded world",
            extra={
                "prefix": envelope.prefix.value,
                "queue_name": queue_name,
                "message_id": envelope.message_id,
                "idempotency_key": envelope.idempotency_key,
            },
        )
