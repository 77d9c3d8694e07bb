"""Cloud Tasks World.

Bridges Google Cloud Tasks to an embedded workflow engine:
- `queue()` pushes workflow/step messages to Cloud Tasks
- `process_task()` takes the HTTP delivery and re-queues it into the engine
"""

__version__ = "0.1.0"

from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.engine import EmbeddedWorld
from cloud_tasks_world.errors import (
    DispatchError,
    InvalidMessage,
    InvalidQueueName,
    MalformedPayload,
    QueueBridgeError,
    ResourceProvisionError,
)
from cloud_tasks_world.models import DeliveryEnvelope, DispatchResult, QueueMessage
from cloud_tasks_world.naming import QueuePrefix
from cloud_tasks_world.world import CloudTasksQueue, create_queue

__all__ = [
    "__version__",
    "CloudTasksQueue",
    "DeliveryEnvelope",
    "DispatchError",
    "DispatchResult",
    "EmbeddedWorld",
    "InvalidMessage",
    "InvalidQueueName",
    "MalformedPayload",
    "QueueBridgeError",
    "QueueMessage",
    "QueuePrefix",
    "ResourceProvisionError",
    "WorldSettings",
    "create_queue",
]
