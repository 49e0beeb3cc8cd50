from __future__ import annotations

import json

import pytest

from edgar_relay.adapters.routers.mcp_router import KEEPALIVE_FRAME, event_stream
from edgar_relay.mcp.events import EventType, SessionEvent
from edgar_relay.mcp.sessions import SessionTable


def _data(frame: str) -> dict[str, object]:
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    return json.loads(frame[len("data: ") : -2])


@pytest.mark.anyio
async def test_stream_starts_with_connected_frame_then_relays_events() -> None:
    sessions = SessionTable()
    session = sessions.open()
    stream = event_stream(session, sessions=sessions, keepalive_s=5.0)

    connected = _data(await stream.__anext__())
    assert connected["type"] == "connected"
    assert connected["sessionId"] == session.id
    assert connected["endpoint"] == f"/messages?sessionId={session.id}"

    session.publish(SessionEvent(EventType.TOOL_CALL, {"name": "get-company-facts", "status": "started"}))
    session.publish(SessionEvent(EventType.TOOL_CALL, {"name": "get-company-facts", "status": "completed"}))

    assert _data(await stream.__anext__())["status"] == "started"
    assert _data(await stream.__anext__())["status"] == "completed"

    sessions.close(session.id)
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()


@pytest.mark.anyio
async def test_stream_sends_keepalive_when_idle() -> None:
    sessions = SessionTable()
    session = sessions.open()
    stream = event_stream(session, sessions=sessions, keepalive_s=0.01)

    await stream.__anext__()
    assert await stream.__anext__() == KEEPALIVE_FRAME

    await stream.aclose()


@pytest.mark.anyio
async def test_closing_the_stream_evicts_the_session() -> None:
    sessions = SessionTable()
    session = sessions.open()
    stream = event_stream(session, sessions=sessions, keepalive_s=5.0)

    await stream.__anext__()
    await stream.aclose()

    assert session.id not in sessions
    assert session.listener_count == 0
    assert not session.is_open
