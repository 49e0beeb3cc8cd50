# src/edgar_relay/adapters/routers/metrics_router.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

The relay and upstream collectors are created lazily; they are touched here
so their families appear on the very first scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from edgar_relay.infrastructure.observability.metrics_edgar import get_edgar_latency_seconds
from edgar_relay.infrastructure.observability.metrics_mcp import (
    get_mcp_calls_total,
    get_mcp_open_sessions,
)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text format."""
    get_edgar_latency_seconds()
    get_mcp_calls_total()
    get_mcp_open_sessions()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
