"""Google Cloud Tasks integration: client wrapper and queue provisioning."""

from cloud_tasks_world.cloud_tasks.client import CloudTasksGateway
from cloud_tasks_world.cloud_tasks.provisioner import QueueProvisioner

__all__ = [
    "CloudTasksGateway",
    "QueueProvisioner",
]
