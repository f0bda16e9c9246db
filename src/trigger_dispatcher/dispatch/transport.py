"""HTTP transport adapters.

The dispatch engine only needs one operation: POST a pre-serialized body and
report the status and decoded payload. Keeping that behind a small interface
keeps network calls out of the engine and makes tests easy.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from trigger_dispatcher.errors import TransportFailure

logger = logging.getLogger(__name__)

JSON_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status and decoded JSON payload of a completed request."""

    status: int
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(ABC):
    """Abstract base class for transports.

    Implementations perform exactly one network call per :meth:`post` and
    never retry.
    """

    @abstractmethod
    def post(
        self,
        url: str,
        *,
        body: str,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        """Issue a POST request.

        Args:
            url: Fully qualified target URL.
            body: Serialized request body.
            headers: Request headers.
            timeout: Optional timeout in seconds.

        Returns:
            The response status and decoded payload.

        Raises:
            TransportFailure: On network-level faults.
        """

    def close(self) -> None:
        """Release any underlying resources."""


class RequestsTransport(Transport):
    """Transport backed by a shared :class:`requests.Session`."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "trigger-dispatcher"})

    def post(
        self,
        url: str,
        *,
        body: str,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        try:
            resp = self._session.post(url, data=body, headers=dict(headers), timeout=timeout)
        except requests.RequestException as e:
            raise TransportFailure(f"Request to {url} failed: {e}", cause=e) from e

        return TransportResponse(status=resp.status_code, payload=_decode(resp))

    def close(self) -> None:
        self._session.close()


def _decode(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except (json.JSONDecodeError, ValueError):
        logger.debug("Response body is not JSON", extra={"status": resp.status_code})
        return None
