"""FastAPI app factory.

Cloud Tasks treats any 2xx response as success and retries everything else,
so the task endpoint only answers 200 once the message has been handed to the
embedded world.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from cloud_tasks_world import __version__
from cloud_tasks_world.errors import InvalidMessage, MalformedPayload
from cloud_tasks_world.world import CloudTasksQueue

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


def create_app(world: CloudTasksQueue) -> FastAPI:
    app = FastAPI(
        title="Cloud Tasks World",
        version=__version__,
        description="Delivery endpoint bridging Cloud Tasks to the embedded workflow world.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url=None,
    )

    app.state.world = world

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {
            "status": "ok",
            "version": __version__,
            "deploymentId": world.get_deployment_id(),
        }

    @app.post(TASKS_PATH)
    async def handle_task(request: Request) -> dict[str, str]:
        raw = await request.body()
        context = {
            "task_name": request.headers.get("x-cloudtasks-taskname"),
            "retry_count": request.headers.get("x-cloudtasks-taskretrycount"),
        }

        try:
            await run_in_threadpool(world.process_task, raw)
        except (MalformedPayload, InvalidMessage) as e:
            logger.warning(str(e), extra=context)
            raise HTTPException(status_code=400, detail=str(e)) from e
        except Exception as e:
            logger.exception("Task delivery failed", extra=context)
            raise HTTPException(status_code=500, detail="Task delivery failed") from e

        return {"status": "ok"}

    return app
