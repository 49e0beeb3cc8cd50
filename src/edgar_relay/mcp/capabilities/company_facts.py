# src/edgar_relay/mcp/capabilities/company_facts.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Capability: get-company-facts"""

from __future__ import annotations

from typing import Any

from edgar_relay.domain.enums.taxonomy import OutputMode, Taxonomy
from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.domain.services.json_shapes import string_or_none
from edgar_relay.domain.services.normalizer import aggregate_company_facts
from edgar_relay.domain.services.size_guard import (
    LEVER_DATES,
    LEVER_LATEST,
    LEVER_MODE,
    LEVER_TAGS,
    LEVER_UNITS,
    guard_payload,
    suggest_narrowing,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions, split_csv
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.schemas.params import CompanyFactsParams

_LEVERS = (LEVER_TAGS, LEVER_LATEST, LEVER_DATES, LEVER_UNITS, LEVER_MODE)
_KNOWN_TAXONOMIES = frozenset(t.value for t in Taxonomy)


def _taxonomy_allow_list(raw: str | None) -> frozenset[str]:
    taxonomies = split_csv(raw)
    unknown = sorted(taxonomies - _KNOWN_TAXONOMIES)
    if unknown:
        raise BadInputError(
            "Unknown taxonomy.",
            details={"unknown": unknown, "allowed": sorted(_KNOWN_TAXONOMIES)},
        )
    return taxonomies


async def company_facts(params: CompanyFactsParams, ctx: CapabilityContext) -> dict[str, Any]:
    """Execute ``get-company-facts``: the company-facts tree reduced by allow-lists.

    Returns:
        ``{cik, entityName, facts}`` or a payload-too-large advisory. Unfiltered
        company facts for a large filer run to tens of megabytes, so the
        advisory is the common answer until a tag filter is supplied.
    """
    cik = Cik.parse(params.cik)
    options = QueryOptions(
        start_date=params.start_date,
        end_date=params.end_date,
        units=split_csv(params.units),
        tags=split_csv(params.tags),
        taxonomies=_taxonomy_allow_list(params.taxonomies),
        latest_only=params.latest_only,
        mode=OutputMode(params.mode),
    )

    payload = await ctx.client.fetch_company_facts(cik)

    result = {
        "cik": cik.padded,
        "entityName": string_or_none(payload.get("entityName")),
        "facts": aggregate_company_facts(payload.get("facts"), options),
    }
    return guard_payload(
        result,
        limit_bytes=ctx.max_payload_bytes,
        suggestions=suggest_narrowing(options, _LEVERS),
    )
