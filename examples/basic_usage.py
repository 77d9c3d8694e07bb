#!/usr/bin/env python3
"""Programmatic dispatch example.

This demonstrates using the bridge components directly:

* load settings from `.env` (GCP_PROJECT_ID, GCP_LOCATION, TASK_HANDLER_URL, ...)
* make sure the workflow/step queues exist
* dispatch one step message, optionally deduplicated by an idempotency key

Deliveries come back to TASK_HANDLER_URL; serve that with
`cloud-tasks-world serve --engine your.module:world`.
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.logging import configure_logging
from cloud_tasks_world.world import create_queue


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dispatch a step message (programmatic example).")
    parser.add_argument("--step-id", required=True, help="Suffix id for the step queue name")
    parser.add_argument("--payload", default="{}", help="Step payload as a JSON object")
    parser.add_argument("--idempotency-key", default=None, help="Optional dedup key")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = WorldSettings()
    configure_logging(settings.log_level)

    world = create_queue(settings)
    try:
        world.start()
        result = world.queue(
            f"__wkf_step_{args.step_id}",
            {"kind": "step", "payload": json.loads(args.payload)},
            idempotency_key=args.idempotency_key,
        )
    finally:
        world.close()

    print(f"Message id: {result.message_id}")
    if result.task_name:
        print(f"Task: {result.task_name}")
    if result.deduplicated:
        print("A task with this idempotency key already exists")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
