"""Trigger manager: one stateful trigger session.

Composes the dispatch engine, the mapping resolver and the history ledger.
Applications construct and own a manager; there is no process-wide instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from trigger_dispatcher.config import DEFAULT_HOST, DEFAULT_PORT, TriggerSettings
from trigger_dispatcher.dispatch.engine import DispatchConfig, DispatchEngine, DispatchOutcome
from trigger_dispatcher.dispatch.transport import RequestsTransport
from trigger_dispatcher.errors import MappingError, NotInitialized, TriggerDispatchError
from trigger_dispatcher.manager.history import HistoryLedger, TriggerEvent
from trigger_dispatcher.manager.state import SessionState, transition
from trigger_dispatcher.mapping.loader import MappingLoadResult, load_mapping_document
from trigger_dispatcher.mapping.resolver import MappingDocument, MappingResolver

logger = logging.getLogger(__name__)

SELF_TEST_EVENT = "system.test"
SELF_TEST_LABEL = "Test trigger on initialization"

MappingLoader = Callable[[str], MappingLoadResult]


class TriggerManager:
    """Stateful trigger session.

    Lifecycle: ``UNINITIALIZED -> INITIALIZING -> READY | FAILED``. Sends are
    only accepted in ``READY``. :meth:`initialize` may be called again at any
    time and always re-runs the full sequence.
    """

    def __init__(
        self,
        engine: DispatchEngine | None = None,
        *,
        loader: MappingLoader = load_mapping_document,
    ) -> None:
        self._engine = engine or DispatchEngine()
        self._loader = loader
        self._resolver = MappingResolver()
        self._history = HistoryLedger()
        self._state = SessionState.UNINITIALIZED
        self._last_load: MappingLoadResult | None = None

    @classmethod
    def from_settings(cls, settings: TriggerSettings) -> TriggerManager:
        engine = DispatchEngine(RequestsTransport(), config=DispatchConfig.from_settings(settings))
        return cls(engine)

    @property
    def engine(self) -> DispatchEngine:
        return self._engine

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is SessionState.READY

    @property
    def mappings(self) -> MappingDocument | None:
        return self._resolver.document

    @property
    def used_fallback_mapping(self) -> bool:
        """True when the last initialize fell back to the built-in mapping."""

        return self._last_load is not None and self._last_load.used_fallback

    def initialize(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        mappings_path: str = "triggerMappings.json",
    ) -> bool:
        """Configure the engine, load mappings and send a self-test trigger.

        Returns:
            True when the session is ready; False when the self-test failed
            (the manager stays usable in the ``FAILED`` state).
        """
        self._set_state(SessionState.INITIALIZING)

        try:
            self._engine.configure_server(host, port)
            self._engine.toggle_verbose(True)
            self._engine.set_performance_mode(True, True)

            result = self._loader(mappings_path)
            self._last_load = result
            if result.used_fallback:
                logger.warning(
                    "Using fallback trigger mappings",
                    extra={"source": result.source, "reason": str(result.error)},
                )
            self._resolver.load(result.or_fallback())

            self._send_by_event(SELF_TEST_EVENT, SELF_TEST_LABEL)
        except TriggerDispatchError as e:
            logger.error(f"Failed to initialize trigger manager: {e}")
            self._set_state(SessionState.FAILED)
            return False
        except Exception:
            logger.exception("Failed to initialize trigger manager")
            self._set_state(SessionState.FAILED)
            return False
        except BaseException:
            # Interrupted mid-sequence; leave the session re-initializable.
            self._set_state(SessionState.FAILED)
            raise

        self._set_state(SessionState.READY)
        logger.info(
            "Trigger manager initialized successfully",
            extra={"url": self._engine.config.base_url, "fallback": result.used_fallback},
        )
        return True

    def get_trigger_value(self, event_path: str) -> int | None:
        """Look up the code for ``event_path``, returning None if it cannot be resolved."""

        try:
            return self._resolver.resolve(event_path)
        except MappingError as e:
            logger.error(str(e))
            return None

    def send_trigger_by_event(self, event_path: str, label: str = "") -> DispatchOutcome:
        """Resolve ``event_path`` and send its code.

        Raises:
            NotInitialized: If the session is not ready.
            NotFound, InvalidLeaf: If the path cannot be resolved; nothing is
                sent or recorded.
            TransportFailure: If the dispatch fails.
        """
        self._require_ready()
        return self._send_by_event(event_path, label)

    def send_trigger(self, value: int, label: str = "") -> DispatchOutcome:
        """Record and send a raw trigger value."""

        self._require_ready()
        return self._send(value, label)

    def send_batch(self, values: Sequence[int], label: str = "") -> DispatchOutcome:
        """Record each value and send them all in one batch request."""

        self._require_ready()
        codes = list(values)
        for code in codes:
            self._history.append(code, label)
        outcome = self._engine.send_batch(codes)
        logger.info(f"Trigger batch sent: {codes}", extra={"label": label})
        return outcome

    def get_trigger_history(self) -> list[TriggerEvent]:
        return self._history.snapshot()

    def close(self) -> None:
        self._engine.close()

    def __enter__(self) -> TriggerManager:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _send_by_event(self, event_path: str, label: str) -> DispatchOutcome:
        value = self._resolver.resolve(event_path)
        full_label = f"{event_path} - {label}" if label else event_path
        return self._send(value, full_label)

    def _send(self, value: int, label: str) -> DispatchOutcome:
        self._history.append(value, label)
        outcome = self._engine.send(value)
        suffix = f" ({label})" if label else ""
        if outcome.confirmed:
            logger.info(f"Trigger sent: {value}{suffix}")
        else:
            logger.info(f"Trigger issued without waiting for a response: {value}{suffix}")
        return outcome

    def _require_ready(self) -> None:
        if self._state is not SessionState.READY:
            logger.warning("Trigger manager not initialized. Trigger not sent.")
            raise NotInitialized(self._state.value)

    def _set_state(self, to: SessionState) -> None:
        self._state = transition(current=self._state, to=to)
        logger.debug("Trigger manager state changed", extra={"state": to.value})
