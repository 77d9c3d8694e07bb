"""Cloud Tasks client wrapper.

This wraps ``google.cloud.tasks_v2`` so the bridge never builds resource paths
or protobuf messages itself, and so tests can inject a mocked client.
"""

from __future__ import annotations

import logging

from google.cloud import tasks_v2

logger = logging.getLogger(__name__)

JSON_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


class CloudTasksGateway:
    """Queue and task operations scoped to one project/location."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        client: tasks_v2.CloudTasksClient | None = None,
    ) -> None:
        if not project_id:
            raise ValueError("Google Cloud project id is required")
        if not location:
            raise ValueError("Google Cloud location is required")

        self._project_id = project_id
        self._location = location

        if client is not None:
            self._client = client
            logger.debug("Using injected CloudTasksClient instance")
            return

        self._client = tasks_v2.CloudTasksClient()
        logger.info(
            "Created Cloud Tasks client",
            extra={"project": project_id, "location": location},
        )

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def location(self) -> str:
        return self._location

    # Path helpers are static on the generated client, so they work the same
    # with a real or a mocked client instance.

    def location_path(self) -> str:
        return tasks_v2.CloudTasksClient.common_location_path(self._project_id, self._location)

    def queue_path(self, queue: str) -> str:
        return tasks_v2.CloudTasksClient.queue_path(self._project_id, self._location, queue)

    def task_path(self, queue: str, task_id: str) -> str:
        return tasks_v2.CloudTasksClient.task_path(
            self._project_id, self._location, queue, task_id
        )

    def get_queue(self, queue: str) -> tasks_v2.Queue:
        """Fetch queue metadata.

        Raises:
            google.api_core.exceptions.NotFound: If the queue does not exist.
        """

        return self._client.get_queue(name=self.queue_path(queue))

    def create_queue(self, queue: str, *, max_dispatches_per_second: float) -> tasks_v2.Queue:
        """Create a queue with the given dispatch rate limit."""

        spec = tasks_v2.Queue(
            name=self.queue_path(queue),
            rate_limits=tasks_v2.RateLimits(max_dispatches_per_second=max_dispatches_per_second),
        )
        return self._client.create_queue(parent=self.location_path(), queue=spec)

    def create_task(
        self,
        queue: str,
        *,
        url: str,
        body: bytes,
        task_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> tasks_v2.Task:
        """Submit an HTTP POST push task.

        When ``task_id`` is given the task is named, and Cloud Tasks rejects a
        second task with the same name with ``AlreadyExists``.
        """

        http_request = tasks_v2.HttpRequest(
            http_method=tasks_v2.HttpMethod.POST,
            url=url,
            headers=dict(headers or JSON_HEADERS),
            body=body,
        )
        if task_id:
            task = tasks_v2.Task(http_request=http_request, name=self.task_path(queue, task_id))
        else:
            task = tasks_v2.Task(http_request=http_request)

        return self._client.create_task(parent=self.queue_path(queue), task=task)

    def close(self) -> None:
        transport = getattr(self._client, "transport", None)
        close = getattr(transport, "close", None)
        if callable(close):
            close()
