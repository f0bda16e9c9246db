"""Test configuration and fixtures."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Mapping

import pytest

from trigger_dispatcher.dispatch.engine import DispatchConfig, DispatchEngine
from trigger_dispatcher.dispatch.transport import Transport, TransportResponse
from trigger_dispatcher.errors import TransportFailure


class StubTransport(Transport):
    """Records every request and answers with a canned response.

    When ``gate`` is set, each call blocks until the event is released, which
    lets tests observe whether a caller waited for the network round trip.
    """

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        *,
        error: TransportFailure | None = None,
        gate: threading.Event | None = None,
    ) -> None:
        self.status = status
        self.payload = payload if payload is not None else {"status": "ok"}
        self.error = error
        self.gate = gate
        self.calls: list[dict[str, Any]] = []
        self.completed = 0
        self.closed = False

    def post(
        self,
        url: str,
        *,
        body: str,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        self.calls.append({"url": url, "body": body, "headers": dict(headers), "timeout": timeout})
        if self.gate is not None:
            self.gate.wait(timeout=5)
        self.completed += 1
        if self.error is not None:
            raise self.error
        return TransportResponse(status=self.status, payload=self.payload)

    def close(self) -> None:
        self.closed = True

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(call["body"]) for call in self.calls]


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def engine(transport: StubTransport) -> DispatchEngine:
    return DispatchEngine(transport, config=DispatchConfig(host="h", port=1))


@pytest.fixture
def nested_mapping() -> dict[str, Any]:
    return {
        "system": {"test": 99, "initialized": 1, "error": 2},
        "scenes": {"intro": {"start": 10, "click_to_play": 11}},
    }


@pytest.fixture
def mapping_file(tmp_path: Path, nested_mapping: dict[str, Any]) -> Path:
    path = tmp_path / "triggerMappings.json"
    path.write_text(json.dumps(nested_mapping), encoding="utf-8")
    return path
