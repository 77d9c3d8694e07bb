"""Lazy provisioning of physical Cloud Tasks queues.

``ensure`` looks the queue up and creates it only on ``NotFound``. Two
processes can race on that create; Cloud Tasks answers the loser with
``AlreadyExists``, which is treated as success because the queue the caller
needs is there either way.

Successful ensures are remembered per process (optional) so steady-state
dispatches skip the lookup round trip.
"""

from __future__ import annotations

import logging
import threading

from google.api_core.exceptions import AlreadyExists, GoogleAPICallError, NotFound

from cloud_tasks_world.cloud_tasks.client import CloudTasksGateway
from cloud_tasks_world.errors import ResourceProvisionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISPATCHES_PER_SECOND = 10


class QueueProvisioner:
    """Ensures physical queues exist before tasks are submitted to them."""

    def __init__(
        self,
        *,
        gateway: CloudTasksGateway,
        max_dispatches_per_second: float = DEFAULT_MAX_DISPATCHES_PER_SECOND,
        cache: bool = True,
    ) -> None:
        if max_dispatches_per_second <= 0:
            raise ValueError("max_dispatches_per_second must be positive")

        self._gateway = gateway
        self._max_dispatches_per_second = max_dispatches_per_second
        self._cache = cache
        self._ensured: set[str] = set()
        self._lock = threading.Lock()

    def is_known(self, queue: str) -> bool:
        with self._lock:
            return queue in self._ensured

    def ensure(self, queue: str) -> None:
        """Make sure ``queue`` exists, creating it if the lookup says it does not.

        Raises:
            ResourceProvisionError: If the lookup fails with anything but
                ``NotFound``, or the create fails with anything but ``AlreadyExists``.
        """

        if self._cache and self.is_known(queue):
            logger.debug("Queue already provisioned in this process", extra={"queue": queue})
            return

        try:
            self._gateway.get_queue(queue)
        except NotFound:
            self._create(queue)
        except GoogleAPICallError as exc:
            raise ResourceProvisionError(queue, "Queue lookup failed") from exc

        if self._cache:
            with self._lock:
                self._ensured.add(queue)

    def _create(self, queue: str) -> None:
        try:
            self._gateway.create_queue(
                queue, max_dispatches_per_second=self._max_dispatches_per_second
            )
        except AlreadyExists:
            logger.info(
                "Queue was created concurrently; treating as provisioned", extra={"queue": queue}
            )
            return
        except GoogleAPICallError as exc:
            raise ResourceProvisionError(queue, "Queue creation failed") from exc

        logger.info(
            "Created Cloud Tasks queue",
            extra={
                "queue": queue,
                "max_dispatches_per_second": self._max_dispatches_per_second,
            },
        )
