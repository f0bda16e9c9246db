from __future__ import annotations

from enum import Enum

from trigger_dispatcher.errors import TriggerDispatchError


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[SessionState, set[SessionState]] = {
    SessionState.UNINITIALIZED: {SessionState.INITIALIZING},
    SessionState.INITIALIZING: {SessionState.READY, SessionState.FAILED},
    SessionState.READY: {SessionState.INITIALIZING},
    SessionState.FAILED: {SessionState.INITIALIZING},
}


class IllegalTransitionError(TriggerDispatchError, ValueError):
    pass


def transition(*, current: SessionState, to: SessionState) -> SessionState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to
