# src/edgar_relay/adapters/routers/mcp_router.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP push-stream router.

Purpose:
    Expose the relay over HTTP: a long-lived event stream per session
    (``GET /sse``) and a message endpoint that dispatches one envelope on a
    session (``POST /messages?sessionId=...``).

Layer:
    adapters/routers

Endpoints:
    - GET  /sse        open a session; ``text/event-stream`` frames
    - POST /messages   dispatch one envelope; events go to the session stream
    - GET  /health     liveness and open-session count
    - GET  /tools      tool descriptors

Notes:
    - The first frame of every stream is ``connected`` and carries the
      message endpoint for the session.
    - A keep-alive comment is written when the stream is idle.
    - The response envelope is returned in the POST body.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from edgar_relay import __version__
from edgar_relay.dependencies.core.bootstrap import RelayState
from edgar_relay.domain.exceptions.errors import BadInputError, UnauthorizedError
from edgar_relay.infrastructure.logging.logger import get_json_logger, set_request_context
from edgar_relay.mcp.events import EventType, SessionEvent
from edgar_relay.mcp.schemas.envelope import MCPRequest
from edgar_relay.mcp.sessions import Session, SessionTable

logger = get_json_logger(__name__)
router = APIRouter()

MESSAGES_PATH = "/messages"
KEEPALIVE_FRAME = ": keep-alive\n\n"


def get_relay_state(request: Request) -> RelayState:
    """Return the runtime wired by the application lifespan."""
    state: RelayState = request.app.state.relay
    return state


def require_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header(alias="X-Api-Key")] = None,
) -> None:
    """Reject the request unless it carries the configured shared secret.

    No-op when no key is configured.

    Raises:
        UnauthorizedError: On a missing or mismatched ``X-Api-Key`` header.
    """
    expected = get_relay_state(request).settings.api_key
    if expected is None:
        return
    if x_api_key != expected:
        raise UnauthorizedError("Missing or invalid X-Api-Key header.")


def message_endpoint(session_id: str) -> str:
    return f"{MESSAGES_PATH}?sessionId={session_id}"


async def event_stream(
    session: Session,
    *,
    sessions: SessionTable,
    keepalive_s: float,
) -> AsyncIterator[str]:
    """Yield push-stream frames for ``session`` until it closes.

    The session is closed and evicted when the generator finishes, including
    when the client disconnects and the generator is cancelled.

    Args:
        session: Open session whose queue is drained.
        sessions: Table the session is registered in.
        keepalive_s: Idle interval after which a keep-alive comment is sent.

    Yields:
        str: ``data: <json>\\n\\n`` frames and ``: keep-alive`` comments.
    """
    connected = SessionEvent(
        EventType.CONNECTED,
        {"sessionId": session.id, "endpoint": message_endpoint(session.id)},
    )
    try:
        yield connected.to_sse()
        while True:
            try:
                event = await asyncio.wait_for(session.queue.get(), timeout=keepalive_s)
            except TimeoutError:
                yield KEEPALIVE_FRAME
                continue
            if event is None:
                break
            yield event.to_sse()
    finally:
        sessions.close(session.id)


@router.get("/sse", dependencies=[Depends(require_api_key)])
async def open_stream(state: Annotated[RelayState, Depends(get_relay_state)]) -> StreamingResponse:
    """Open a session and stream its events."""
    session = state.sessions.open()
    return StreamingResponse(
        event_stream(
            session,
            sessions=state.sessions,
            keepalive_s=state.settings.sse_keepalive_s,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Session-ID": session.id,
        },
    )


@router.post(MESSAGES_PATH, dependencies=[Depends(require_api_key)])
async def post_message(
    request: Request,
    state: Annotated[RelayState, Depends(get_relay_state)],
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
) -> JSONResponse:
    """Dispatch one envelope on an open session.

    Raises:
        BadInputError: Missing ``sessionId`` or a body that is not a valid envelope.
        NotFoundError: No open session with that id.
    """
    if not session_id:
        raise BadInputError("Query parameter 'sessionId' is required.")
    session = state.sessions.get(session_id)
    set_request_context(session_id=session.id)

    body = await request.body()
    try:
        envelope = MCPRequest.model_validate_json(body)
    except ValidationError as exc:
        raise BadInputError(
            "Request body is not a valid envelope.",
            details={
                "errors": [
                    {
                        "field": ".".join(str(p) for p in err["loc"]) or "body",
                        "message": err["msg"],
                    }
                    for err in exc.errors()
                ]
            },
        ) from exc

    response = await state.server.call(envelope, publish=session.publish)
    return JSONResponse(content=response.model_dump(mode="json"))


@router.get("/health")
async def health(state: Annotated[RelayState, Depends(get_relay_state)]) -> dict[str, Any]:
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "sessions": len(state.sessions),
    }


@router.get("/tools", dependencies=[Depends(require_api_key)])
async def list_tools(state: Annotated[RelayState, Depends(get_relay_state)]) -> dict[str, Any]:
    return {"tools": state.server.registry.describe()}
