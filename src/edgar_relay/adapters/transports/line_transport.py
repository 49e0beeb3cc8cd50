# src/edgar_relay/adapters/transports/line_transport.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Line transport: one JSON envelope per line in, one per line out.

Purpose:
    Serve the relay over a pair of byte streams (stdin/stdout when run from
    the CLI). Every non-blank input line is one request envelope; every
    response is written as exactly one line.

Layer:
    adapters/transports

Notes:
    - Requests are served strictly in order.
    - Session events have no stream here; they go to the log (stderr).
    - Malformed lines get a ``BAD_INPUT`` envelope with ``id: null`` and the
      loop continues. End of input stops the loop.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.infrastructure.logging.logger import get_json_logger
from edgar_relay.mcp.events import log_publisher
from edgar_relay.mcp.schemas.envelope import MCPRequest, MCPResponse
from edgar_relay.mcp.server import MCPServer

logger = get_json_logger(__name__)

ReadLine = Callable[[], Awaitable[bytes | str]]
WriteLine = Callable[[str], Awaitable[None]]


def _encode(response: MCPResponse) -> str:
    payload: dict[str, Any] = response.model_dump(mode="json")
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def decode_line(line: bytes | str) -> str:
    """Decode one raw input line as UTF-8.

    Raises:
        BadInputError: If the bytes are not valid UTF-8.
    """
    if isinstance(line, str):
        return line
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadInputError(
            "Line is not valid UTF-8.",
            details={"position": exc.start},
        ) from exc


def parse_line(line: str) -> MCPRequest:
    """Parse one input line into a request envelope.

    Raises:
        BadInputError: If the line is not JSON or not a valid envelope.
    """
    try:
        return MCPRequest.model_validate_json(line)
    except ValidationError as exc:
        raise BadInputError(
            "Line is not a valid request envelope.",
            details={"errors": [err["msg"] for err in exc.errors()]},
        ) from exc


async def handle_line(server: MCPServer, line: bytes | str) -> str | None:
    """Serve one input line; returns the output line, or None for blank input."""
    if not line.strip():
        return None
    try:
        request = parse_line(decode_line(line))
    except BadInputError as exc:
        logger.warning("line.rejected", extra={"extra": {"reason": exc.message}})
        return _encode(MCPResponse.failure(None, exc))
    response = await server.call(request, publish=log_publisher)
    return _encode(response)


async def serve_lines(server: MCPServer, read_line: ReadLine, write_line: WriteLine) -> int:
    """Serve envelopes until ``read_line`` returns an empty line (end of input).

    Args:
        server: Dispatcher.
        read_line: Returns the next line including its newline, or an empty
            value at EOF. Raw bytes are decoded per line.
        write_line: Writes one output line (without newline).

    Returns:
        int: Number of responses written.
    """
    served = 0
    while True:
        line = await read_line()
        if not line:
            break
        output = await handle_line(server, line)
        if output is None:
            continue
        await write_line(output)
        served += 1
    logger.info("line.eof", extra={"extra": {"served": served}})
    return served


async def _stdin_line() -> bytes:
    return await asyncio.to_thread(sys.stdin.buffer.readline)


async def _stdout_line(text: str) -> None:
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


async def serve_stdio(server: MCPServer) -> int:
    """Serve the line transport on stdin/stdout."""
    logger.info("line.start")
    return await serve_lines(server, _stdin_line, _stdout_line)
