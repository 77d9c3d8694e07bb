"""Error taxonomy for the queue bridge.

Nothing here is retried locally. Dispatch failures surface to the producer and
delivery failures surface to the HTTP layer, which answers with a non-success
status so Cloud Tasks redelivers on its own backoff schedule.
"""

from __future__ import annotations


class QueueBridgeError(Exception):
    """Base class for every error raised by the bridge itself."""


class InvalidQueueName(QueueBridgeError, ValueError):
    """A queue name does not start with a recognised namespace prefix."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid queue name: {name!r}")
        self.name = name


class ResourceProvisionError(QueueBridgeError):
    """Looking up or creating a physical queue failed for a reason other than not-found."""

    def __init__(self, queue: str, message: str) -> None:
        super().__init__(f"{message}: {queue}")
        self.queue = queue


class DispatchError(QueueBridgeError):
    """Cloud Tasks rejected a task submission."""

    def __init__(self, queue: str, message: str) -> None:
        super().__init__(f"{message}: {queue}")
        self.queue = queue


class MalformedPayload(QueueBridgeError):
    """A delivered envelope is missing required fields or names an unknown prefix."""


class InvalidMessage(QueueBridgeError):
    """A message could not be decoded or does not match the message schema.

    Raised at dispatch, before anything is submitted, and again at delivery.
    """
