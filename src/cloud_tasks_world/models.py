"""Pydantic models shared by the dispatch and delivery paths."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from cloud_tasks_world.naming import QueuePrefix, build_queue_name


class QueueMessage(BaseModel):
    """A unit of work handed to the embedded engine."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["workflow", "step"]
    payload: dict[str, Any] = Field(default_factory=dict)
    trace_carrier: dict[str, str] | None = Field(default=None, alias="traceCarrier")


class DeliveryEnvelope(BaseModel):
    """The JSON body Cloud Tasks posts back to the delivery endpoint.

    ``prefix`` and ``id`` together rebuild the original logical queue name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    data: str
    message_id: str = Field(alias="messageId")
    idempotency_key: str | None = Field(default=None, alias="idempotencyKey")
    prefix: QueuePrefix

    @property
    def queue_name(self) -> str:
        return build_queue_name(self.prefix, self.id)

    def to_json_bytes(self) -> bytes:
        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of a single dispatch.

    ``task_name`` is the full Cloud Tasks resource name when known. For
    idempotent dispatches it is derived from the key, so repeated dispatches
    with the same key report the same name.
    """

    message_id: str
    task_name: str | None = None
    deduplicated: bool = False
