"""CLI entrypoint for the Cloud Tasks world.

Commands:
- ensure-queues: create the physical queues if they are missing
- queue-paths:   print the Cloud Tasks queue path for each namespace prefix
- enqueue:       dispatch one JSON message to a logical queue
- serve:         run the delivery endpoint in front of an embedded world
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import uvicorn
from pydantic import ValidationError

from cloud_tasks_world import __version__
from cloud_tasks_world.config import WorldSettings
from cloud_tasks_world.engine import load_embedded_world
from cloud_tasks_world.errors import InvalidMessage, InvalidQueueName
from cloud_tasks_world.logging import configure_logging
from cloud_tasks_world.server.app import create_app
from cloud_tasks_world.world import create_queue

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloud-tasks-world",
        description="Bridge Google Cloud Tasks to an embedded workflow world",
    )
    parser.add_argument(
        "--version", action="version", version=f"cloud-tasks-world {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "ensure-queues",
        help="Create the workflow and step queues in Cloud Tasks if they do not exist",
    )
    subparsers.add_parser(
        "queue-paths",
        help="Print the Cloud Tasks queue path for each namespace prefix",
    )

    enqueue = subparsers.add_parser("enqueue", help="Dispatch a message to a logical queue")
    enqueue.add_argument(
        "--queue",
        required=True,
        help="Logical queue name, e.g. '__wkf_step_abc123'",
    )
    enqueue.add_argument(
        "--message",
        required=True,
        help='Message as JSON, e.g. \'{"kind": "step", "payload": {"x": 1}}\'',
    )
    enqueue.add_argument(
        "--idempotency-key",
        default=None,
        help="Optional key; repeated dispatches with the same key create one task",
    )

    serve = subparsers.add_parser("serve", help="Serve the Cloud Tasks delivery endpoint")
    serve.add_argument(
        "--engine",
        required=True,
        help="Embedded world to deliver into, as 'package.module:attribute'",
    )
    serve.add_argument("--host", default="0.0.0.0", help="Host to bind")  # noqa: S104
    serve.add_argument(
        "--port", type=int, default=None, help="Port to bind (defaults to PORT / 3000)"
    )
    serve.add_argument(
        "--skip-ensure",
        action="store_true",
        help="Do not ensure the queues exist before serving",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorldSettings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "queue-paths":
            world = create_queue(settings)
            try:
                for prefix, queue in world.queues.items():
                    print(f"{prefix.value}\t{world.gateway.queue_path(queue)}")
            finally:
                world.close()
            return 0

        if args.command == "ensure-queues":
            world = create_queue(settings)
            try:
                world.start()
            finally:
                world.close()
            print("Queues ready")
            return 0

        if args.command == "enqueue":
            try:
                message = json.loads(args.message)
            except json.JSONDecodeError as e:
                print(f"--message is not valid JSON: {e}", file=sys.stderr)
                return 2

            world = create_queue(settings)
            try:
                result = world.queue(args.queue, message, idempotency_key=args.idempotency_key)
            finally:
                world.close()

            if result.deduplicated:
                print(f"Deduplicated: {result.task_name}")
            print(result.message_id)
            return 0

        if args.command == "serve":
            world = create_queue(settings, embedded_world=load_embedded_world(args.engine))
            try:
                if not args.skip_ensure:
                    world.start()
                uvicorn.run(
                    create_app(world),
                    host=args.host,
                    port=args.port or settings.port,
                    log_level=settings.log_level.lower(),
                )
            finally:
                world.close()
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (InvalidQueueName, InvalidMessage) as e:
        print(str(e), file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
