"""In-memory history of dispatch attempts."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TriggerEvent:
    """A trigger the manager attempted to send.

    Entries record intent to send, not confirmed delivery.
    """

    value: int
    label: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_json(self) -> dict[str, object]:
        return {
            "value": self.value,
            "label": self.label,
            "timestamp": self.timestamp.isoformat(),
        }


class HistoryLedger:
    """Append-only, insertion-ordered record of trigger events.

    Lives for the lifetime of the owning session; nothing is persisted.
    """

    def __init__(self) -> None:
        self._events: list[TriggerEvent] = []

    def append(self, value: int, label: str = "") -> TriggerEvent:
        event = TriggerEvent(value=value, label=label)
        self._events.append(event)
        logger.debug("Trigger recorded", extra={"value": value, "label": label})
        return event

    def snapshot(self) -> list[TriggerEvent]:
        """Return a copy; later appends do not affect it."""

        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[TriggerEvent]:
        return iter(self.snapshot())
