"""Exception types raised by the trigger dispatcher.

Every public operation that cannot complete its contract raises one of these
rather than an unstructured fault.
"""

from __future__ import annotations

from typing import Any


class TriggerDispatchError(Exception):
    """Base class for all trigger dispatcher errors."""


class TransportFailure(TriggerDispatchError):
    """A dispatch failed at the HTTP or network level.

    ``status`` is set for non-success HTTP responses; ``cause`` is set for
    network-level faults (DNS, connection refused, timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.cause = cause


class MappingError(TriggerDispatchError):
    """An event path could not be resolved to a trigger code."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


class NotFound(MappingError):
    def __init__(self, path: str, *, reason: str | None = None) -> None:
        message = f"Trigger path not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path=path)


class InvalidLeaf(MappingError):
    def __init__(self, path: str, value: Any) -> None:
        super().__init__(f"Invalid trigger value at path {path}: {value!r}", path=path)
        self.value = value


class NotInitialized(TriggerDispatchError):
    """A send was attempted while the trigger manager is not ready."""

    def __init__(self, state: str) -> None:
        super().__init__(f"Trigger manager not initialized (state={state})")
        self.state = state


class MappingLoadFailure(TriggerDispatchError):
    """A mapping document could not be loaded.

    Returned inside :class:`trigger_dispatcher.mapping.loader.MappingLoadResult`
    instead of being raised, so callers can fall back explicitly.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load trigger mappings from {source}: {reason}")
        self.source = source
        self.reason = reason
