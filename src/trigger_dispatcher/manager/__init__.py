"""Trigger sessions: state machine, history ledger and the trigger manager."""

from trigger_dispatcher.manager.history import HistoryLedger, TriggerEvent
from trigger_dispatcher.manager.state import IllegalTransitionError, SessionState
from trigger_dispatcher.manager.trigger_manager import TriggerManager

__all__ = [
    "HistoryLedger",
    "IllegalTransitionError",
    "SessionState",
    "TriggerEvent",
    "TriggerManager",
]
