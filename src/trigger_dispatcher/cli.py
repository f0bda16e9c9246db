"""CLI entrypoint for the trigger dispatcher.

Useful for checking a recording endpoint and a mapping document before an
experiment session. Endpoint and mode settings come from ``TRIGGER_*``
environment variables or `.env`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from trigger_dispatcher import __version__
from trigger_dispatcher.config import TriggerSettings
from trigger_dispatcher.dispatch.engine import DispatchConfig, DispatchEngine, DispatchOutcome
from trigger_dispatcher.dispatch.transport import RequestsTransport
from trigger_dispatcher.errors import MappingError, TransportFailure
from trigger_dispatcher.logging import configure_logging
from trigger_dispatcher.manager.trigger_manager import TriggerManager
from trigger_dispatcher.mapping.loader import load_mapping_document
from trigger_dispatcher.mapping.resolver import MappingResolver, flatten

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trigger-dispatcher",
        description="Send experiment trigger codes to a recording endpoint",
    )
    parser.add_argument("--version", action="version", version=f"trigger-dispatcher {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Send a raw trigger value")
    send.add_argument("value", type=int, help="Trigger code to send")

    batch = subparsers.add_parser("batch", help="Send several trigger values in one request")
    batch.add_argument("values", type=int, nargs="+", help="Trigger codes to send")

    send_event = subparsers.add_parser(
        "send-event",
        help="Initialize a trigger session and send the code mapped to an event path",
    )
    send_event.add_argument("path", help="Event path, e.g. 'scenes.intro.start'")
    send_event.add_argument("--label", default="", help="Optional description for the log")
    send_event.add_argument(
        "--mappings",
        default=None,
        help="Mapping document (file path or URL); defaults to TRIGGER_MAPPINGS_PATH",
    )

    resolve = subparsers.add_parser(
        "resolve", help="Resolve event paths against a mapping document without sending"
    )
    resolve.add_argument("path", nargs="?", default=None, help="Event path to resolve")
    resolve.add_argument(
        "--list", action="store_true", help="Print every event path and its code"
    )
    resolve.add_argument(
        "--mappings",
        default=None,
        help="Mapping document (file path or URL); defaults to TRIGGER_MAPPINGS_PATH",
    )

    return parser


def _print_outcome(outcome: DispatchOutcome) -> None:
    if outcome.confirmed:
        print(f"Sent {outcome.value} (HTTP {outcome.http_status})")
    else:
        print(f"Issued {outcome.value} (response not awaited)")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = TriggerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your TRIGGER_* variables or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "send":
            with DispatchEngine(
                RequestsTransport(), config=DispatchConfig.from_settings(settings)
            ) as engine:
                _print_outcome(engine.send(args.value))
            return 0

        if args.command == "batch":
            with DispatchEngine(
                RequestsTransport(), config=DispatchConfig.from_settings(settings)
            ) as engine:
                _print_outcome(engine.send_batch(args.values))
            return 0

        if args.command == "send-event":
            mappings = args.mappings or settings.mappings_path
            with TriggerManager.from_settings(settings) as manager:
                if not manager.initialize(settings.host, settings.port, mappings):
                    print("Trigger manager failed to initialize", file=sys.stderr)
                    return 5
                if manager.used_fallback_mapping:
                    print(f"Warning: using fallback mappings ({mappings} not loaded)", file=sys.stderr)
                _print_outcome(manager.send_trigger_by_event(args.path, args.label))
            return 0

        if args.command == "resolve":
            mappings = args.mappings or settings.mappings_path
            result = load_mapping_document(mappings, timeout=settings.timeout_seconds)
            if result.document is None:
                print(str(result.error), file=sys.stderr)
                return 2

            if args.list:
                print(json.dumps(flatten(result.document), indent=2))
                return 0
            if args.path is None:
                parser.error("resolve requires PATH or --list")

            print(MappingResolver(result.document).resolve(args.path))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except MappingError as e:
        print(str(e), file=sys.stderr)
        return 3

    except TransportFailure as e:
        print(str(e), file=sys.stderr)
        return 4

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
