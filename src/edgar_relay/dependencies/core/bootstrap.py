# src/edgar_relay/dependencies/core/bootstrap.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Core bootstrap for the relay runtime (upstream client, registry, sessions).

This module owns the lifecycle of the shared objects both transports use. It
is intentionally thin: configuration comes from Settings and construction is
delegated to the infrastructure and mcp modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a :class:`RelayState`.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from edgar_relay.config.settings import Settings, get_settings
from edgar_relay.infrastructure.external_apis.edgar.client import EdgarClient
from edgar_relay.infrastructure.logging.interaction_log import InteractionLog
from edgar_relay.infrastructure.logging.logger import get_json_logger
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.catalog import build_registry
from edgar_relay.mcp.server import MCPServer
from edgar_relay.mcp.sessions import SessionTable

logger = get_json_logger(__name__)


@dataclass
class RelayState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    client: EdgarClient
    server: MCPServer
    sessions: SessionTable


@asynccontextmanager
async def bootstrap(
    settings: Settings | None = None,
    *,
    http: httpx.AsyncClient | None = None,
) -> AsyncGenerator[RelayState, None]:
    """Initialize and tear down the relay runtime.

    Responsibilities:
        * Resolve settings (raises FatalConfigError when invalid).
        * Create the upstream client and build the registry once.
        * Close every open session and the upstream client on exit.

    Args:
        settings: Explicit settings; defaults to :func:`get_settings`.
        http: Optional ``httpx.AsyncClient`` for the upstream client (tests
            pass one backed by a mock transport). It is not closed here.

    Yields:
        RelayState: The wired runtime.
    """
    settings = settings or get_settings()
    logger.info("bootstrap.start", extra={"extra": {"environment": settings.environment.value}})

    client = EdgarClient(
        user_agent=settings.user_agent,
        base_url=settings.edgar_base_url,
        timeout_s=settings.edgar_timeout_s,
        http=http,
    )
    registry = build_registry(CapabilityContext.from_settings(client, settings))
    interaction_log = (
        InteractionLog(settings.interaction_log_dir) if settings.interaction_log_dir else None
    )
    state = RelayState(
        settings=settings,
        client=client,
        server=MCPServer(registry, interaction_log=interaction_log),
        sessions=SessionTable(),
    )

    try:
        yield state
    finally:
        state.sessions.close_all()
        try:
            await client.aclose()
        except Exception:
            logger.exception("bootstrap.client_close_failed")
        logger.info("bootstrap.stop")
