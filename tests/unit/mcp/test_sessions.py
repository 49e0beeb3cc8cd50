from __future__ import annotations

import pytest

from edgar_relay.domain.exceptions.errors import NotFoundError
from edgar_relay.mcp.events import EventType, SessionEvent
from edgar_relay.mcp.sessions import Session, SessionState, SessionTable


def test_session_lifecycle() -> None:
    session = Session("s-1")
    assert session.state is SessionState.CONNECTING

    session.open()
    assert session.is_open
    with pytest.raises(RuntimeError):
        session.open()

    session.close()
    session.close()
    assert session.state is SessionState.CLOSED


@pytest.mark.anyio
async def test_publish_reaches_listeners_in_order_until_closed() -> None:
    session = Session()
    seen: list[str] = []
    unsubscribe = session.subscribe(lambda e: seen.append(f"a:{e.data['n']}"))
    session.subscribe(lambda e: seen.append(f"b:{e.data['n']}"))

    session.publish(SessionEvent(EventType.TOOL_CALL, {"n": 0}))
    assert seen == []

    session.open()
    session.publish(SessionEvent(EventType.TOOL_CALL, {"n": 1}))
    unsubscribe()
    session.publish(SessionEvent(EventType.TOOL_CALL, {"n": 2}))
    session.close()
    session.publish(SessionEvent(EventType.TOOL_CALL, {"n": 3}))

    assert seen == ["a:1", "b:1", "b:2"]
    assert session.listener_count == 0


@pytest.mark.anyio
async def test_table_queues_events_and_ends_stream_on_close() -> None:
    table = SessionTable()
    session = table.open()

    assert session.id in table
    assert table.get(session.id) is session
    assert session.listener_count == 1

    session.publish(SessionEvent(EventType.ERROR, {"kind": "BAD_INPUT"}))
    table.close(session.id)

    assert session.listener_count == 0
    assert session.id not in table
    assert len(table) == 0
    first = await session.queue.get()
    assert first is not None and first.type is EventType.ERROR
    assert await session.queue.get() is None

    with pytest.raises(NotFoundError):
        table.get(session.id)
    table.close(session.id)


@pytest.mark.anyio
async def test_session_context_manager_and_close_all() -> None:
    table = SessionTable()
    async with table.session() as session:
        assert session.is_open
        other = table.open()
    assert session.state is SessionState.CLOSED
    assert len(table) == 1

    table.close_all()
    assert other.state is SessionState.CLOSED
    assert len(table) == 0


def test_event_wire_format() -> None:
    event = SessionEvent(EventType.RESOURCE_UPDATE, {"uri": "sec://x"}, timestamp="2024-01-01T00:00:00+00:00")
    assert event.to_dict() == {
        "type": "resource-update",
        "timestamp": "2024-01-01T00:00:00+00:00",
        "uri": "sec://x",
    }
    assert event.to_sse() == (
        'data: {"type":"resource-update","timestamp":"2024-01-01T00:00:00+00:00","uri":"sec://x"}\n\n'
    )
