"""Queue namespace resolution.

Logical queue names look like ``__wkf_step_<id>``: a namespace prefix naming the
kind of work, followed by an arbitrary producer-chosen id. Each prefix maps to
exactly one physical Cloud Tasks queue, named ``{queue_prefix}{suffix}``:

- ``__wkf_workflow_`` -> ``workflow-flows``
- ``__wkf_step_``     -> ``workflow-steps``

(with the default ``workflow-`` queue prefix).
"""

from __future__ import annotations

from enum import Enum

from cloud_tasks_world.errors import InvalidQueueName

DEFAULT_QUEUE_PREFIX = "workflow-"


class QueuePrefix(str, Enum):
    WORKFLOW = "__wkf_workflow_"
    STEP = "__wkf_step_"


PHYSICAL_QUEUE_SUFFIXES: dict[QueuePrefix, str] = {
    QueuePrefix.WORKFLOW: "flows",
    QueuePrefix.STEP: "steps",
}


def parse_queue_name(name: str) -> tuple[QueuePrefix, str]:
    """Split a logical queue name into its namespace prefix and suffix id.

    Raises:
        InvalidQueueName: If the name does not start with a known prefix.
    """

    # Longest prefix first, so a future prefix that extends another cannot be shadowed.
    for prefix in sorted(QueuePrefix, key=lambda p: len(p.value), reverse=True):
        if name.startswith(prefix.value):
            return prefix, name[len(prefix.value) :]
    raise InvalidQueueName(name)


def build_queue_name(prefix: QueuePrefix, queue_id: str) -> str:
    """Inverse of :func:`parse_queue_name`."""

    return f"{QueuePrefix(prefix).value}{queue_id}"


def physical_queue_name(prefix: QueuePrefix, *, queue_prefix: str = DEFAULT_QUEUE_PREFIX) -> str:
    """Return the Cloud Tasks queue id that serves the given namespace prefix."""

    return f"{queue_prefix}{PHYSICAL_QUEUE_SUFFIXES[QueuePrefix(prefix)]}"


def queue_table(queue_prefix: str = DEFAULT_QUEUE_PREFIX) -> dict[QueuePrefix, str]:
    """Map every namespace prefix to its physical queue id."""

    return {prefix: physical_queue_name(prefix, queue_prefix=queue_prefix) for prefix in QueuePrefix}
