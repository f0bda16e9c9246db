#!/usr/bin/env python3
"""Programmatic trigger session example.

This demonstrates using the dispatcher components directly:

* load settings from `.env` / ``TRIGGER_*`` variables
* initialize a trigger session against a mapping document
* send event-based and raw triggers
* print the session history

Start a recording endpoint first. The bundled stub runs under uvicorn, which
the optional ``server`` extra installs (``pip install .[server]``):

    uvicorn trigger_dispatcher.server:create_app --factory --port 5000
"""

from __future__ import annotations

import argparse
from typing import Sequence

from trigger_dispatcher import TransportFailure, TriggerManager, TriggerSettings
from trigger_dispatcher.errors import MappingError
from trigger_dispatcher.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a short trigger session.")
    parser.add_argument("--mappings", default=None, help="Mapping document path or URL")
    parser.add_argument(
        "--event",
        action="append",
        default=[],
        help='Event path to send, e.g. "scenes.intro.start" (repeatable)',
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = TriggerSettings()
    configure_logging(settings.log_level)

    with TriggerManager.from_settings(settings) as manager:
        ok = manager.initialize(
            settings.host, settings.port, args.mappings or settings.mappings_path
        )
        if not ok:
            print("Initialization failed")
            return 1

        for event in args.event:
            try:
                manager.send_trigger_by_event(event, "basic_usage")
            except MappingError as exc:
                print(f"Skipped: {exc}")

        # Wait for confirmation on the final marker.
        manager.engine.set_performance_mode(False)
        try:
            manager.send_trigger_by_event("system.initialized", "session end")
        except (MappingError, TransportFailure) as exc:
            print(f"End marker not confirmed: {exc}")

    for entry in manager.get_trigger_history():
        print(f"{entry.timestamp.isoformat()}  {entry.value:>5}  {entry.label}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
