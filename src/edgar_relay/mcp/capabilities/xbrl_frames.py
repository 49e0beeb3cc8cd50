# src/edgar_relay/mcp/capabilities/xbrl_frames.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Capability: get-xbrl-frames"""

from __future__ import annotations

from typing import Any

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.services.json_shapes import string_or_none
from edgar_relay.domain.services.normalizer import rank_frame
from edgar_relay.domain.services.size_guard import (
    LEVER_MODE,
    LEVER_TOP_N,
    guard_payload,
    suggest_narrowing,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions, split_csv
from edgar_relay.infrastructure.external_apis.edgar.paths import frame_period
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.schemas.params import XbrlFramesParams

_LEVERS = (LEVER_TOP_N, LEVER_MODE)


async def xbrl_frames(params: XbrlFramesParams, ctx: CapabilityContext) -> dict[str, Any]:
    """Execute ``get-xbrl-frames``: one fact per filer for a period, ranked by value.

    Returns:
        ``{taxonomy, tag, unit, period, label, total, count, data}`` where
        ``total`` counts rows after the CIK filter and ``data`` holds the top
        ``topN`` rows, highest value first.
    """
    period = frame_period(params.year, params.quarter, params.instantaneous)
    ciks = frozenset(Cik.parse(raw).padded for raw in split_csv(params.ciks))
    options = QueryOptions(
        top_n=params.top_n if params.top_n is not None else ctx.default_top_n,
        mode=OutputMode(params.mode),
    )

    payload = await ctx.client.fetch_frame(params.taxonomy, params.tag, params.unit, period)
    total, rows = rank_frame(payload.get("data"), options, ciks=ciks or None)

    result = {
        "taxonomy": params.taxonomy,
        "tag": params.tag,
        "unit": params.unit,
        "period": period,
        "label": string_or_none(payload.get("label")),
        "total": total,
        "count": len(rows),
        "data": rows,
    }
    return guard_payload(
        result,
        limit_bytes=ctx.max_payload_bytes,
        suggestions=suggest_narrowing(options, _LEVERS),
    )
