# src/edgar_relay/mcp/sessions.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Push-stream sessions.

Purpose:
    Track one :class:`Session` per open push-stream connection. A session owns
    its listener list and an unbounded outbound queue; closing it removes
    every listener and evicts it from the :class:`SessionTable`.

Layer:
    mcp

Notes:
    - State machine: ``CONNECTING → OPEN → CLOSED`` (terminal).
    - Touched only from the event loop thread, so no locking.
    - The queue is unbounded: events are advisory telemetry and slow
      consumers are allowed to buffer.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from enum import Enum

from edgar_relay.domain.exceptions.errors import NotFoundError
from edgar_relay.infrastructure.logging.logger import get_json_logger
from edgar_relay.infrastructure.observability.metrics_mcp import get_mcp_open_sessions
from edgar_relay.mcp.events import SessionEvent

logger = get_json_logger(__name__)

Listener = Callable[[SessionEvent], None]


class SessionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Session:
    """One push-stream session."""

    def __init__(self, session_id: str | None = None) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.state = SessionState.CONNECTING
        # ``None`` is the end-of-stream sentinel.
        self.queue: asyncio.Queue[SessionEvent | None] = asyncio.Queue()
        self._listeners: list[Listener] = []

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def open(self) -> None:
        """Complete the handshake: ``CONNECTING → OPEN``."""
        if self.state is not SessionState.CONNECTING:
            raise RuntimeError(f"Session {self.id} cannot open from state {self.state.value}")
        self.state = SessionState.OPEN

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, event: SessionEvent) -> None:
        """Deliver ``event`` to every listener, in registration order.

        Events published after close are dropped.
        """
        if not self.is_open:
            return
        for listener in list(self._listeners):
            listener(event)

    def close(self) -> None:
        """Transition to ``CLOSED``, drop all listeners and end the stream (idempotent)."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self._listeners.clear()
        self.queue.put_nowait(None)


class SessionTable:
    """Open sessions keyed by id."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._gauge = get_mcp_open_sessions()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def open(self) -> Session:
        """Mint, open and register a new session whose queue listens to its own events."""
        session = Session()
        session.subscribe(session.queue.put_nowait)
        session.open()
        self._sessions[session.id] = session
        self._gauge.inc()
        logger.info("session.opened", extra={"extra": {"session_id": session.id}})
        return session

    def get(self, session_id: str) -> Session:
        """Return the open session with ``session_id``.

        Raises:
            NotFoundError: If no open session has that id.
        """
        session = self._sessions.get(session_id)
        if session is None or not session.is_open:
            raise NotFoundError(
                "No open session with this id.",
                details={"sessionId": session_id},
            )
        return session

    def close(self, session_id: str) -> None:
        """Close and evict a session; unknown ids are ignored."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        session.close()
        self._gauge.dec()
        logger.info("session.closed", extra={"extra": {"session_id": session_id}})

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Session]:
        """Open a session for the duration of the block; it is closed on exit."""
        session = self.open()
        try:
            yield session
        finally:
            self.close(session.id)
