"""Contract for the embedded execution engine.

The engine owns workflow and step execution, including its own idempotency
handling. The bridge only hands delivered messages to :meth:`EmbeddedWorld.queue`
and forwards handler registration unchanged.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from cloud_tasks_world.models import QueueMessage
from cloud_tasks_world.naming import QueuePrefix

logger = logging.getLogger(__name__)

QueueHandler = Callable[..., Any]


class EmbeddedWorld(ABC):
    """Abstract base class for an in-process workflow engine."""

    @abstractmethod
    def queue(
        self,
        queue_name: str,
        message: QueueMessage,
        *,
        idempotency_key: str | None = None,
    ) -> Any:
        """Enqueue a message for execution inside the engine.

        Args:
            queue_name: Full logical queue name, e.g. ``__wkf_step_abc123``.
            message: The validated message.
            idempotency_key: Optional key the engine may use to deduplicate.
        """

    @abstractmethod
    def create_queue_handler(self, prefix: QueuePrefix, handler: QueueHandler) -> Any:
        """Register ``handler`` for messages under ``prefix``."""


def load_embedded_world(target: str) -> EmbeddedWorld:
    """Import an engine from a ``"package.module:attribute"`` reference.

    The attribute may be an :class:`EmbeddedWorld` instance or a zero-argument
    callable returning one.

    Raises:
        ValueError: If ``target`` is not in ``module:attribute`` form.
        TypeError: If the resolved object is not an :class:`EmbeddedWorld`.
    """

    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Engine reference must look like 'package.module:attribute': {target!r}")

    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attribute.split("."):
        obj = getattr(obj, part)

    if not isinstance(obj, EmbeddedWorld) and callable(obj):
        obj = obj()

    if not isinstance(obj, EmbeddedWorld):
        raise TypeError(f"{target!r} did not resolve to an EmbeddedWorld (got {type(obj).__name__})")

    logger.info("Loaded embedded world", extra={"target": target})
    return obj
