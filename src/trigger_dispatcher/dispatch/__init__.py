"""Trigger transmission: transport adapters and the dispatch engine."""

from trigger_dispatcher.dispatch.engine import (
    BATCH_PATH,
    SINGLE_PATH,
    DispatchConfig,
    DispatchEngine,
    DispatchOutcome,
)
from trigger_dispatcher.dispatch.transport import (
    RequestsTransport,
    Transport,
    TransportResponse,
)

__all__ = [
    "BATCH_PATH",
    "SINGLE_PATH",
    "DispatchConfig",
    "DispatchEngine",
    "DispatchOutcome",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
