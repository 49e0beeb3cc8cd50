# src/edgar_relay/mcp/events.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Session events.

Purpose:
    Define the advisory events a dispatched call emits (tool invoked,
    resource fetched, error) and their push-stream framing.

Layer:
    mcp
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from edgar_relay.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class EventType(str, Enum):
    """Kinds of events delivered on a session stream."""

    CONNECTED = "connected"
    TOOL_CALL = "tool-call"
    RESOURCE_UPDATE = "resource-update"
    ERROR = "error"


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass(frozen=True)
class SessionEvent:
    """One event; ``data`` keys are merged into the wire object."""

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "timestamp": self.timestamp, **self.data}

    def to_sse(self) -> str:
        """Frame the event as ``data: <json>\\n\\n``."""
        return f"data: {json.dumps(self.to_dict(), separators=(',', ':'), default=str)}\n\n"


Publish = Callable[[SessionEvent], None]


def log_publisher(event: SessionEvent) -> None:
    """Publish function for transports without a push stream: events go to the log."""
    logger.info("session.event", extra={"extra": event.to_dict()})


def discard_publisher(event: SessionEvent) -> None:
    """Publish function that drops every event."""
    return None
