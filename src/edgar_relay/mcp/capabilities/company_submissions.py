# src/edgar_relay/mcp/capabilities/company_submissions.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Capability: get-company-submissions and the submissions resource.

Purpose:
    Page through a company's filing history. EDGAR serves the most recent
    filings inline (``filings.recent``) and older ones as separate paged
    files listed under ``filings.files``; both are columnar and are pivoted to
    rows before paging.

Resource contract (``sec://submissions/{cik}{/path*}``):
    * no path → listing of child names: ``recent`` plus each history file.
    * ``recent`` → paginated filing rows, same shape as the tool.
    * ``<history file>.json`` → that file, pivoted and paginated.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.domain.services.json_shapes import string_or_none
from edgar_relay.domain.services.normalizer import (
    history_file_names,
    pivot_columns,
    recent_filings,
)
from edgar_relay.domain.services.size_guard import paginate
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions, split_csv
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.schemas.params import CompanySubmissionsParams, SubmissionsResourceParams

RECENT: Final[str] = "recent"


def _page_of(
    rows: Sequence[Mapping[str, Any]],
    *,
    forms: frozenset[str],
    page: int,
    page_size: int,
) -> dict[str, Any]:
    # QueryOptions validates page / page_size bounds.
    options = QueryOptions(page=page, page_size=page_size)
    if forms:
        rows = [row for row in rows if row.get("form") in forms]
    return paginate(rows, options.page, options.page_size).to_dict()


async def company_submissions(
    params: CompanySubmissionsParams,
    ctx: CapabilityContext,
) -> dict[str, Any]:
    """Execute ``get-company-submissions``: one page of recent filings."""
    cik = Cik.parse(params.cik)
    payload = await ctx.client.fetch_submissions(cik)
    return {
        "cik": cik.padded,
        "entityName": string_or_none(payload.get("name")),
        **_page_of(
            recent_filings(payload),
            forms=split_csv(params.form),
            page=params.page,
            page_size=params.page_size or ctx.default_page_size,
        ),
    }


async def submissions_resource(
    params: SubmissionsResourceParams,
    ctx: CapabilityContext,
) -> dict[str, Any]:
    """Read ``sec://submissions/{cik}{/path*}``."""
    cik = Cik.parse(params.cik)
    child = (params.path or "").strip("/")
    page_size = params.page_size or ctx.default_page_size
    forms = split_csv(params.form)

    if child in ("", RECENT):
        payload = await ctx.client.fetch_submissions(cik)
        if not child:
            return {
                "cik": cik.padded,
                "entityName": string_or_none(payload.get("name")),
                "children": [RECENT, *history_file_names(payload)],
            }
        return {
            "cik": cik.padded,
            "entityName": string_or_none(payload.get("name")),
            "path": RECENT,
            **_page_of(recent_filings(payload), forms=forms, page=params.page, page_size=page_size),
        }

    if not child.startswith(f"CIK{cik.padded}-"):
        raise BadInputError(
            "History file does not belong to this company.",
            details={"cik": cik.padded, "path": child},
        )
    payload = await ctx.client.fetch_submissions_file(child)
    return {
        "cik": cik.padded,
        "path": child,
        **_page_of(pivot_columns(payload), forms=forms, page=params.page, page_size=page_size),
    }
