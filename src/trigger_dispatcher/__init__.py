"""Trigger Dispatcher.

Converts experiment events into numeric marker codes and posts them to a
recording endpoint:
- hierarchical or flat mapping documents resolve event paths to codes
- standard, low-latency and fire-and-forget transmission modes
- an in-memory history of every dispatch attempt
"""

__version__ = "0.1.0"

from trigger_dispatcher.config import TriggerSettings
from trigger_dispatcher.dispatch.engine import DispatchConfig, DispatchEngine, DispatchOutcome
from trigger_dispatcher.errors import (
    InvalidLeaf,
    MappingLoadFailure,
    NotFound,
    NotInitialized,
    TransportFailure,
    TriggerDispatchError,
)
from trigger_dispatcher.manager.trigger_manager import TriggerManager
from trigger_dispatcher.mapping.resolver import MappingResolver

__all__ = [
    "__version__",
    "DispatchConfig",
    "DispatchEngine",
    "DispatchOutcome",
    "InvalidLeaf",
    "MappingLoadFailure",
    "MappingResolver",
    "NotFound",
    "NotInitialized",
    "TransportFailure",
    "TriggerDispatchError",
    "TriggerManager",
    "TriggerSettings",
]
