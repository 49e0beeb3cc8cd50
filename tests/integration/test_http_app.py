from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from edgar_relay.config.settings import Settings
from edgar_relay.domain.exceptions.errors import FatalConfigError
from edgar_relay.main import create_app
from edgar_relay.mcp.events import EventType


@pytest.fixture
def client(settings: Settings, mock_transport: httpx.MockTransport) -> Iterator[TestClient]:
    http = httpx.AsyncClient(transport=mock_transport)
    app = create_app(settings, http=http)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def secured_client(mock_transport: httpx.MockTransport) -> Iterator[TestClient]:
    settings = Settings(
        _env_file=None,
        environment="test",
        sec_api_mail="ops@example.com",
        sec_api_company="Example Research",
        mcp_api_key="s3cret",
    )
    app = create_app(settings, http=httpx.AsyncClient(transport=mock_transport))
    with TestClient(app) as test_client:
        yield test_client


def test_health_reports_open_sessions(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["sessions"] == 0
    assert body["version"]

    client.app.state.relay.sessions.open()
    assert client.get("/health").json()["sessions"] == 1


def test_tools_endpoint_lists_catalog(client: TestClient) -> None:
    resp = client.get("/tools")
    assert resp.status_code == 200
    assert len(resp.json()["tools"]) == 8


def test_post_message_dispatches_and_streams_events(client: TestClient) -> None:
    session = client.app.state.relay.sessions.open()

    resp = client.post(
        f"/messages?sessionId={session.id}",
        json={
            "id": 7,
            "method": "tools/call",
            "params": {"name": "get-company-submissions", "arguments": {"cik": "320193", "pageSize": 2}},
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == 7
    assert body["error"] is None
    assert body["result"]["total"] == 3
    assert len(body["result"]["items"]) == 2

    started = session.queue.get_nowait()
    completed = session.queue.get_nowait()
    assert started is not None and completed is not None
    assert (started.type, started.data["status"]) == (EventType.TOOL_CALL, "started")
    assert (completed.type, completed.data["status"]) == (EventType.TOOL_CALL, "completed")


def test_call_level_errors_are_enveloped_with_200(client: TestClient) -> None:
    session = client.app.state.relay.sessions.open()

    resp = client.post(
        f"/messages?sessionId={session.id}",
        json={"id": "a", "method": "tools/call", "params": {"name": "get-stock-price"}},
    )

    assert resp.status_code == 200
    assert resp.json()["error"]["type"] == "NOT_FOUND"
    session.queue.get_nowait()
    error_event = session.queue.get_nowait()
    assert error_event is not None and error_event.type is EventType.ERROR


def test_messages_requires_known_session_and_valid_body(client: TestClient) -> None:
    missing = client.post("/messages", json={"method": "tools/list"})
    assert missing.status_code == 400
    assert missing.json()["error"]["type"] == "BAD_INPUT"

    unknown = client.post("/messages?sessionId=nope", json={"method": "tools/list"})
    assert unknown.status_code == 404
    assert unknown.json()["error"]["type"] == "NOT_FOUND"

    session = client.app.state.relay.sessions.open()
    malformed = client.post(
        f"/messages?sessionId={session.id}",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert malformed.status_code == 400
    assert malformed.json()["result"] is None


def test_closed_session_rejects_messages(client: TestClient) -> None:
    sessions = client.app.state.relay.sessions
    session = sessions.open()
    sessions.close(session.id)

    resp = client.post(f"/messages?sessionId={session.id}", json={"method": "tools/list"})

    assert resp.status_code == 404
    assert session.listener_count == 0


def test_unknown_route_uses_envelope(client: TestClient) -> None:
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "HTTP_ERROR"


def test_metrics_endpoint_exposes_relay_families(client: TestClient) -> None:
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "edgar_relay_open_sessions" in resp.text


def test_api_key_is_enforced_when_configured(secured_client: TestClient) -> None:
    denied = secured_client.get("/tools")
    assert denied.status_code == 401
    assert denied.json()["error"]["type"] == "UNAUTHORIZED"

    wrong = secured_client.get("/tools", headers={"X-Api-Key": "nope"})
    assert wrong.status_code == 401

    allowed = secured_client.get("/tools", headers={"X-Api-Key": "s3cret"})
    assert allowed.status_code == 200

    assert secured_client.get("/health").status_code == 200


def test_shutdown_closes_open_sessions(settings: Settings, mock_transport: httpx.MockTransport) -> None:
    app = create_app(settings, http=httpx.AsyncClient(transport=mock_transport))
    with TestClient(app) as test_client:
        session = test_client.app.state.relay.sessions.open()
    assert not session.is_open


@pytest.mark.usefixtures("relay_env")
def test_create_app_without_contact_identity_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEC_API_COMPANY")
    with pytest.raises(FatalConfigError):
        create_app()
