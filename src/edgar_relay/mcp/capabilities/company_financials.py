# src/edgar_relay/mcp/capabilities/company_financials.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Capabilities: financial statement summaries, ratios and comparisons.

Purpose:
    Summarize the latest value of each core us-gaap tag into income, balance
    and cash-flow statements, derive ratios, and compare several companies.

Notes:
    - Compare tools fetch companies concurrently. A failure for one company
      is reported inline for that company and never fails the whole call.
    - Only the latest reported value is summarized.
"""

from __future__ import annotations

import asyncio
from typing import Any, Final

from edgar_relay.domain.exceptions.errors import BadInputError, RelayError
from edgar_relay.domain.services.financials import (
    RATIO_NAMES,
    compute_ratios,
    group_statements,
    latest_core_values,
    parse_statements,
)
from edgar_relay.domain.services.json_shapes import string_or_none
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import split_csv
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.schemas.params import (
    MAX_COMPARE_COMPANIES,
    CompanyFinancialsParams,
    CompanyMetricsParams,
    CompareFinancialsParams,
    CompareMetricsParams,
)

PERIOD_LATEST: Final[str] = "latest"


async def _load(ctx: CapabilityContext, cik: Cik) -> tuple[str | None, dict[str, Any]]:
    payload = await ctx.client.fetch_company_facts(cik)
    return string_or_none(payload.get("entityName")), latest_core_values(payload)


def _ratio_filter(raw: str | None) -> tuple[str, ...] | None:
    names = split_csv(raw)
    if not names:
        return None
    return tuple(name for name in RATIO_NAMES if name in names)


def _parse_companies(raw: str) -> list[Cik]:
    seen: dict[str, Cik] = {}
    for part in raw.split(","):
        if not part.strip():
            continue
        cik = Cik.parse(part)
        seen.setdefault(cik.padded, cik)
    if not seen:
        raise BadInputError("companies must list at least one CIK.", details={"companies": raw})
    if len(seen) > MAX_COMPARE_COMPANIES:
        raise BadInputError(
            f"At most {MAX_COMPARE_COMPANIES} companies can be compared.",
            details={"count": len(seen)},
        )
    return list(seen.values())


def _inline_error(cik: Cik, exc: RelayError) -> dict[str, Any]:
    return {
        "cik": cik.padded,
        "error": {"type": exc.kind, "message": exc.message, "retryable": exc.retryable},
    }


async def _summary(
    ctx: CapabilityContext,
    cik: Cik,
    *,
    statements: tuple[str, ...],
    with_metrics: bool,
) -> dict[str, Any]:
    entity_name, values = await _load(ctx, cik)
    summary: dict[str, Any] = {
        "cik": cik.padded,
        "entityName": entity_name,
        "period": PERIOD_LATEST,
        "statements": group_statements(values, statements),
    }
    if with_metrics:
        summary["metrics"] = compute_ratios(values)
    return summary


async def company_financials(
    params: CompanyFinancialsParams,
    ctx: CapabilityContext,
) -> dict[str, Any]:
    """Execute ``get-company-financials``."""
    cik = Cik.parse(params.company)
    statements = parse_statements(params.statements)
    result = await _summary(ctx, cik, statements=statements, with_metrics=params.metrics)

    fields = split_csv(params.fields)
    if fields:
        result = {key: value for key, value in result.items() if key in fields}
    return result


async def company_metrics(params: CompanyMetricsParams, ctx: CapabilityContext) -> dict[str, Any]:
    """Execute ``get-company-metrics``."""
    cik = Cik.parse(params.company)
    entity_name, values = await _load(ctx, cik)
    return {
        "cik": cik.padded,
        "entityName": entity_name,
        "period": PERIOD_LATEST,
        "metrics": compute_ratios(values, _ratio_filter(params.metrics)),
    }


async def compare_financials(
    params: CompareFinancialsParams,
    ctx: CapabilityContext,
) -> dict[str, Any]:
    """Execute ``compare-financials``."""
    ciks = _parse_companies(params.companies)
    statements = parse_statements(params.statements)

    async def _one(cik: Cik) -> dict[str, Any]:
        try:
            return await _summary(ctx, cik, statements=statements, with_metrics=params.metrics)
        except RelayError as exc:
            return _inline_error(cik, exc)

    comparison = await asyncio.gather(*(_one(cik) for cik in ciks))
    return {
        "period": PERIOD_LATEST,
        "statements": list(statements),
        "comparison": list(comparison),
    }


async def compare_metrics(params: CompareMetricsParams, ctx: CapabilityContext) -> dict[str, Any]:
    """Execute ``compare-metrics``."""
    ciks = _parse_companies(params.companies)
    only = _ratio_filter(params.metrics)

    async def _one(cik: Cik) -> dict[str, Any]:
        try:
            entity_name, values = await _load(ctx, cik)
        except RelayError as exc:
            return _inline_error(cik, exc)
        return {
            "cik": cik.padded,
            "entityName": entity_name,
            "metrics": compute_ratios(values, only),
        }

    comparison = await asyncio.gather(*(_one(cik) for cik in ciks))
    return {
        "period": PERIOD_LATEST,
        "metrics": list(only) if only is not None else list(RATIO_NAMES),
        "comparison": list(comparison),
    }
