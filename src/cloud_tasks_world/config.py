"""Configuration for the Cloud Tasks world.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Only the Google Cloud project and location are required. Everything else has
a default that works against a local delivery endpoint.
"""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cloud_tasks_world.naming import DEFAULT_QUEUE_PREFIX


class WorldSettings(BaseSettings):
    """Settings for the queue bridge.

    Environment variables:
    - GCP_PROJECT_ID
    - GCP_LOCATION
    - WORLD_QUEUE_PREFIX              (optional)
    - WORLD_QUEUE_CONCURRENCY         (optional)
    - TASK_HANDLER_URL                (optional)
    - WORLD_DEPLOYMENT_ID             (optional)
    - WORLD_CACHE_PROVISIONED_QUEUES  (optional)
    - LOG_LEVEL                       (optional)
    - PORT                            (optional)

    Notes:
        Tests can point at a specific env file with
        `WorldSettings(_env_file=path_to_env)`.
    """

    gcp_project_id: str = Field(
        default="",
        validation_alias="GCP_PROJECT_ID",
        description="Google Cloud project that owns the task queues",
    )
    gcp_location: str = Field(
        default="",
        validation_alias="GCP_LOCATION",
        description="Google Cloud region of the task queues, e.g. 'us-central1'",
    )

    queue_prefix: str = Field(
        default=DEFAULT_QUEUE_PREFIX,
        validation_alias="WORLD_QUEUE_PREFIX",
        description="Prefix for physical queue names ('<prefix>flows', '<prefix>steps')",
    )
    queue_concurrency: float = Field(
        default=10,
        gt=0,
        validation_alias="WORLD_QUEUE_CONCURRENCY",
        description="Max dispatches per second for queues created by the bridge",
    )

    task_handler_url: str = Field(
        default="http://localhost:3000/api/tasks",
        validation_alias="TASK_HANDLER_URL",
        description="URL Cloud Tasks pushes deliveries to",
    )

    deployment_id: str = Field(
        default="cloud-tasks-world",
        validation_alias="WORLD_DEPLOYMENT_ID",
        description="Identifier reported to the engine as the deployment id",
    )

    cache_provisioned_queues: bool = Field(
        default=True,
        validation_alias="WORLD_CACHE_PROVISIONED_QUEUES",
        description="Skip the queue lookup once a queue has been ensured in this process",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    port: int = Field(
        default=3000,
        validation_alias="PORT",
        description="Port the delivery endpoint listens on when served from the CLI",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("queue_prefix")
    @classmethod
    def _default_blank_prefix(cls, value: str) -> str:
        return value.strip() or DEFAULT_QUEUE_PREFIX

    @model_validator(mode="after")
    def _require_gcp_target(self) -> WorldSettings:
        if not self.gcp_project_id.strip():
            raise ValueError("GCP_PROJECT_ID is required")
        if not self.gcp_location.strip():
            raise ValueError("GCP_LOCATION is required")
        return self
