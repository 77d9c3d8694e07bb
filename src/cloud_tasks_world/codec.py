"""Message serialization for the task body.

The dispatch path turns a message into an opaque string carried in the
envelope's ``data`` field; the delivery path reads it back from a stream of
chunks. Schema validation happens in the delivery handler, not here.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel


class MessageCodec(ABC):
    """Abstract serializer for queue messages."""

    @abstractmethod
    def serialize(self, message: Any) -> str:
        """Encode a message as an opaque string body."""

    @abstractmethod
    def deserialize(self, stream: Iterable[bytes | str]) -> Any:
        """Decode a body previously produced by :meth:`serialize`.

        Raises:
            ValueError: If the body cannot be decoded.
        """


class JsonTransport(MessageCodec):
    """Compact JSON codec."""

    def serialize(self, message: Any) -> str:
        if isinstance(message, BaseModel):
            message = message.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(message, separators=(",", ":"), ensure_ascii=False)

    def deserialize(self, stream: Iterable[bytes | str]) -> Any:
        raw = b"".join(
            chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk) for chunk in stream
        )
        return json.loads(raw.decode("utf-8"))
