"""Unit tests for the requests-backed transport (mocked session)."""

from __future__ import annotations

from unittest.mock import Mock

import pytest
import requests

from trigger_dispatcher.dispatch.transport import RequestsTransport, TransportResponse
from trigger_dispatcher.errors import TransportFailure


def _session(status: int = 200, content: bytes = b'{"ok": true}') -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.content = content
    resp.json.return_value = {"ok": True}
    session = Mock()
    session.headers = {}
    session.post.return_value = resp
    return session


def test_post_returns_status_and_decoded_payload() -> None:
    session = _session()
    transport = RequestsTransport(session)

    resp = transport.post(
        "http://h:1/set_data",
        body='{"trigger_value": 1}',
        headers={"Content-Type": "application/json"},
        timeout=2.0,
    )

    assert resp == TransportResponse(status=200, payload={"ok": True})
    assert resp.ok is True
    session.post.assert_called_once_with(
        "http://h:1/set_data",
        data='{"trigger_value": 1}',
        headers={"Content-Type": "application/json"},
        timeout=2.0,
    )


def test_empty_body_decodes_to_none() -> None:
    transport = RequestsTransport(_session(status=204, content=b""))

    resp = transport.post("http://h:1/set_data", body="{}", headers={})

    assert resp.payload is None
    assert resp.ok is True


def test_non_json_body_decodes_to_none() -> None:
    session = _session(content=b"OK")
    session.post.return_value.json.side_effect = ValueError("not json")

    resp = RequestsTransport(session).post("http://h:1/set_data", body="{}", headers={})

    assert resp.payload is None


def test_error_status_is_returned_not_raised() -> None:
    resp = RequestsTransport(_session(status=500)).post("http://h:1/set_data", body="{}", headers={})

    assert resp.ok is False
    assert resp.status == 500


def test_network_fault_raises_transport_failure() -> None:
    session = _session()
    session.post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportFailure) as exc_info:
        RequestsTransport(session).post("http://h:1/set_data", body="{}", headers={})

    assert isinstance(exc_info.value.cause, requests.ConnectionError)
    assert exc_info.value.status is None


def test_close_closes_session() -> None:
    session = _session()
    RequestsTransport(session).close()

    session.close.assert_called_once()
