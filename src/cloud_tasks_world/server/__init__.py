"""FastAPI adapter exposing the Cloud Tasks delivery endpoint.

Design intent:
- Keep bridge logic in `cloud_tasks_world.*`
- Keep HTTP concerns (routing, status mapping) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from cloud_tasks_world.server.app import create_app
