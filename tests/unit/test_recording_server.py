"""Tests for the recording endpoint stub, including an end-to-end dispatch."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import urlsplit

from fastapi.testclient import TestClient

from trigger_dispatcher.dispatch.engine import DispatchConfig, DispatchEngine
from trigger_dispatcher.dispatch.transport import Transport, TransportResponse
from trigger_dispatcher.manager.trigger_manager import TriggerManager
from trigger_dispatcher.mapping.loader import MappingLoadResult
from trigger_dispatcher.server.app import create_app
from trigger_dispatcher.server.config import ServerSettings


class TestClientTransport(Transport):
    """Routes dispatcher requests into the in-process FastAPI app."""

    __test__ = False

    def __init__(self, client: TestClient) -> None:
        self._client = client

    def post(
        self,
        url: str,
        *,
        body: str,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> TransportResponse:
        resp = self._client.post(urlsplit(url).path, content=body, headers=dict(headers))
        return TransportResponse(status=resp.status_code, payload=resp.json())


def test_health() -> None:
    client = TestClient(create_app())

    assert client.get("/health").json() == {"status": "ok"}


def test_set_data_records_value() -> None:
    client = TestClient(create_app())

    resp = client.post("/set_data", json={"trigger_value": 12})

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "received": [12]}
    received = client.get("/received").json()
    assert [r["value"] for r in received] == [12]
    assert received[0]["source"] == "single"


def test_set_data_rejects_malformed_payload() -> None:
    client = TestClient(create_app())

    assert client.post("/set_data", json={"value": 12}).status_code == 422
    assert client.post("/set_data/batch", json={"trigger_values": []}).status_code == 422


def test_received_is_bounded() -> None:
    client = TestClient(create_app(ServerSettings(_env_file=None, max_records=2)))

    for value in (1, 2, 3):
        client.post("/set_data", json={"trigger_value": value})

    assert [r["value"] for r in client.get("/received").json()] == [2, 3]


def test_engine_round_trip_through_stub_endpoint() -> None:
    client = TestClient(create_app())
    engine = DispatchEngine(TestClientTransport(client), config=DispatchConfig(low_latency=True))

    single = engine.send(7)
    batch = engine.send_batch([8, 9])

    assert single.payload == {"status": "ok", "received": [7]}
    assert batch.payload == {"status": "ok", "received": [8, 9]}
    received = client.get("/received").json()
    assert [(r["value"], r["source"]) for r in received] == [
        (7, "single"),
        (8, "batch"),
        (9, "batch"),
    ]


def test_managed_session_against_stub_endpoint() -> None:
    client = TestClient(create_app())
    manager = TriggerManager(
        DispatchEngine(TestClientTransport(client)),
        loader=lambda source: MappingLoadResult(
            source=source, document={"system": {"test": 99}, "trial": {"onset": 21}}
        ),
    )

    with manager:
        assert manager.initialize() is True
        manager.send_trigger_by_event("trial.onset", "trial 1")

    values = [r["value"] for r in client.get("/received").json()]
    assert sorted(values) == [21, 99]
    assert [e.value for e in manager.get_trigger_history()] == [99, 21]
