"""Dispatch engine: turns trigger codes into POST requests.

Two send paths exist:

- standard: serialize ``{"trigger_value": code}`` and wait for the response.
- low-latency: reuse one request buffer per engine and only rewrite its body.
  With ``skip_response`` the call returns a ``pending`` outcome immediately and
  the request completes in the background, unobserved by the caller.

The low-latency buffer is shared by every call on the same engine. Callers must
keep at most one low-latency send in flight per engine (call, then wait);
overlapping sends from several threads on one engine race on the buffer body.
Use one engine per thread when true concurrency is needed.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Literal, Mapping, Sequence

from trigger_dispatcher.config import DEFAULT_HOST, DEFAULT_PORT, TriggerSettings
from trigger_dispatcher.dispatch.transport import JSON_HEADERS, RequestsTransport, Transport
from trigger_dispatcher.errors import TransportFailure
from trigger_dispatcher.logging import wall_clock

logger = logging.getLogger(__name__)

SINGLE_PATH = "/set_data"
BATCH_PATH = "/set_data/batch"

_BODY_PREFIX = '{"trigger_value": '
_BODY_SUFFIX = "}"


def _check_code(code: int) -> None:
    # bool is an int subclass but serializes differently on the two send paths.
    if isinstance(code, bool):
        raise TypeError(f"Trigger code must be an int, not bool: {code!r}")


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Transmission settings read at the start of every dispatch."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    scheme: str = "http"
    verbose: bool = False
    low_latency: bool = False
    skip_response: bool = False
    timeout_seconds: float | None = 5.0

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def skips_response(self) -> bool:
        # skip_response is ignored outside low-latency mode.
        return self.low_latency and self.skip_response

    @classmethod
    def from_settings(cls, settings: TriggerSettings) -> DispatchConfig:
        return cls(
            host=settings.host,
            port=settings.port,
            scheme=settings.scheme,
            verbose=settings.verbose,
            low_latency=settings.low_latency,
            skip_response=settings.skip_response,
            timeout_seconds=settings.timeout_seconds,
        )


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Result of a dispatch.

    ``status`` is ``"pending"`` only for skip-response sends, where nothing
    about the network call is known yet.
    """

    status: Literal["ok", "pending"]
    value: int | list[int]
    http_status: int | None = None
    payload: Any = None

    @property
    def confirmed(self) -> bool:
        return self.status == "ok"


class DispatchEngine:
    """Sends trigger codes to the recording endpoint."""

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        config: DispatchConfig | None = None,
    ) -> None:
        self._transport = transport or RequestsTransport()
        self._config = config or DispatchConfig()
        self._request: dict[str, Any] = {
            "url": "",
            "headers": dict(JSON_HEADERS),
            "body": "",
        }
        self._background: ThreadPoolExecutor | None = None
        self._rebuild_request_url()

    @property
    def config(self) -> DispatchConfig:
        return self._config

    def update(self, **changes: Any) -> DispatchConfig:
        """Replace configuration fields; takes effect on the next dispatch."""

        self._config = replace(self._config, **changes)
        self._rebuild_request_url()
        logger.debug("Dispatch configuration updated", extra={"changes": changes})
        return self._config

    def configure_server(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.update(host=host, port=port)
        logger.info("Trigger server configured", extra={"url": self._config.base_url})

    def toggle_verbose(self, enabled: bool) -> None:
        self.update(verbose=enabled)

    def set_performance_mode(self, low_latency: bool, skip_response: bool = False) -> None:
        self.update(low_latency=low_latency, skip_response=skip_response)
        logger.info(
            "Performance mode set",
            extra={"low_latency": low_latency, "skip_response": skip_response},
        )

    def send(self, code: int) -> DispatchOutcome:
        """Send a single trigger code.

        Args:
            code: Trigger code. No range validation is applied.

        Returns:
            ``ok`` outcome with the decoded response body, or a ``pending``
            outcome in skip-response mode.

        Raises:
            TransportFailure: On a non-success status or a network fault
                (never raised in skip-response mode).
            TypeError: If ``code`` is a bool.
        """
        _check_code(code)
        cfg = self._config
        if cfg.low_latency:
            return self._send_low_latency(code, cfg)

        body = json.dumps({"trigger_value": code})
        return self._post(
            cfg.base_url + SINGLE_PATH, body, value=code, cfg=cfg, headers=JSON_HEADERS
        )

    def send_batch(self, codes: Sequence[int]) -> DispatchOutcome:
        """Send several trigger codes in one request; always waits for the response."""

        cfg = self._config
        values = list(codes)
        for code in values:
            _check_code(code)
        body = json.dumps({"trigger_values": values})
        return self._post(
            cfg.base_url + BATCH_PATH, body, value=values, cfg=cfg, headers=JSON_HEADERS
        )

    def flush(self) -> None:
        """Block until every background (skip-response) send has completed."""

        if self._background is not None:
            self._background.shutdown(wait=True)
            self._background = None

    def close(self) -> None:
        """Wait for background sends to finish and release the transport."""

        self.flush()
        self._transport.close()

    def __enter__(self) -> DispatchEngine:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _rebuild_request_url(self) -> None:
        self._request["url"] = self._config.base_url + SINGLE_PATH

    def _send_low_latency(self, code: int, cfg: DispatchConfig) -> DispatchOutcome:
        request = self._request
        request["body"] = _BODY_PREFIX + str(code) + _BODY_SUFFIX

        if cfg.skips_response:
            self._submit_background(request["url"], request["body"], code, cfg)
            return DispatchOutcome(status="pending", value=code)

        return self._post(
            request["url"], request["body"], value=code, cfg=cfg, headers=request["headers"]
        )

    def _submit_background(self, url: str, body: str, code: int, cfg: DispatchConfig) -> Future:
        if self._background is None:
            self._background = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="trigger-background"
            )
        return self._background.submit(self._post_unobserved, url, body, code, cfg)

    def _post_unobserved(self, url: str, body: str, code: int, cfg: DispatchConfig) -> None:
        try:
            self._post(url, body, value=code, cfg=cfg, headers=self._request["headers"])
        except TransportFailure:
            # Already logged by _post; nobody is waiting for this result.
            return
        except Exception:
            logger.exception("Background trigger send failed", extra={"value": code})

    def _post(
        self,
        url: str,
        body: str,
        *,
        value: int | list[int],
        cfg: DispatchConfig,
        headers: Mapping[str, str],
    ) -> DispatchOutcome:
        if cfg.verbose:
            logger.info(f"[{wall_clock()}] Sending trigger: {value}", extra={"url": url})

        try:
            resp = self._transport.post(url, body=body, headers=headers, timeout=cfg.timeout_seconds)
        except TransportFailure as e:
            self._log_failure(value, e, cfg)
            raise

        if cfg.verbose:
            logger.info(
                f"[{wall_clock()}] Response received for trigger: {value}",
                extra={"status": resp.status},
            )

        if not resp.ok:
            error = TransportFailure(f"HTTP error! Status: {resp.status}", status=resp.status)
            self._log_failure(value, error, cfg)
            raise error

        return DispatchOutcome(
            status="ok", value=value, http_status=resp.status, payload=resp.payload
        )

    @staticmethod
    def _log_failure(value: int | list[int], error: TransportFailure, cfg: DispatchConfig) -> None:
        if cfg.verbose:
            logger.error(
                f"[{wall_clock()}] Error sending trigger {value}: {error}",
                extra={"status": error.status},
            )
        else:
            logger.error(f"Error sending trigger {value}: {error}")
