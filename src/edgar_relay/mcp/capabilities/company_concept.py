# src/edgar_relay/mcp/capabilities/company_concept.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Capability: get-company-concept"""

from __future__ import annotations

from typing import Any

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.services.json_shapes import string_or_none
from edgar_relay.domain.services.normalizer import flatten_units
from edgar_relay.domain.services.size_guard import (
    LEVER_DATES,
    LEVER_LATEST,
    LEVER_MODE,
    LEVER_UNITS,
    guard_payload,
    suggest_narrowing,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions, split_csv
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.schemas.params import CompanyConceptParams

_LEVERS = (LEVER_UNITS, LEVER_LATEST, LEVER_DATES, LEVER_MODE)


async def company_concept(params: CompanyConceptParams, ctx: CapabilityContext) -> dict[str, Any]:
    """Execute ``get-company-concept``: one concept's facts, per unit, filtered.

    Returns:
        ``{cik, taxonomy, tag, label, entityName, units}`` (plus ``description``
        in full mode), or a payload-too-large advisory.
    """
    cik = Cik.parse(params.cik)
    options = QueryOptions(
        start_date=params.start_date,
        end_date=params.end_date,
        units=split_csv(params.units),
        latest_only=params.latest_only,
        mode=OutputMode(params.mode),
    )

    payload = await ctx.client.fetch_company_concept(cik, params.taxonomy, params.tag)

    result: dict[str, Any] = {
        "cik": cik.padded,
        "taxonomy": params.taxonomy,
        "tag": params.tag,
        "label": string_or_none(payload.get("label")),
        "entityName": string_or_none(payload.get("entityName")),
        "units": flatten_units(payload.get("units"), options),
    }
    if options.mode is OutputMode.FULL:
        result["description"] = string_or_none(payload.get("description"))

    return guard_payload(
        result,
        limit_bytes=ctx.max_payload_bytes,
        suggestions=suggest_narrowing(options, _LEVERS),
    )
