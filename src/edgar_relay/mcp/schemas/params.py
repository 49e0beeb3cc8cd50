# src/edgar_relay/mcp/schemas/params.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP Schemas: tool and resource parameters.

Purpose:
- Define one parameter model per tool / resource. The registry validates
  call arguments against these models and advertises their JSON schema.

Layer: mcp/schemas

Notes:
- Wire names are camelCase (``startDate``, ``pageSize``); Python attributes
  stay snake_case.
- Tools validate strictly (JSON primitive types must match exactly).
  Resources validate in lax mode because their arguments arrive as URI path
  and query-string text.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from edgar_relay.domain.value_objects.query_options import MAX_PAGE_SIZE
from edgar_relay.infrastructure.external_apis.edgar.paths import MAX_FRAME_YEAR, MIN_FRAME_YEAR

TaxonomyName = Literal["us-gaap", "ifrs-full", "dei", "srt"]
ModeName = Literal["brief", "full"]

_CIK_PATTERN = r"^\s*\d{1,10}\s*$"
_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
MAX_COMPARE_COMPANIES = 10


class _Params(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _DateWindow(_Params):
    start_date: str | None = Field(
        default=None,
        pattern=_DATE_PATTERN,
        description="Inclusive lower bound on a fact's end date (YYYY-MM-DD).",
    )
    end_date: str | None = Field(
        default=None,
        pattern=_DATE_PATTERN,
        description="Inclusive upper bound on a fact's end date (YYYY-MM-DD).",
    )
    latest_only: bool = Field(
        default=False,
        description="Keep only the most recent fact per unit.",
    )


class CompanyConceptParams(_DateWindow):
    """Input parameters for ``get-company-concept``."""

    cik: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    taxonomy: TaxonomyName = Field(..., description="XBRL taxonomy, e.g. us-gaap.")
    tag: str = Field(..., min_length=1, description="XBRL tag, e.g. AccountsPayableCurrent.")
    units: str | None = Field(
        default=None,
        description="Comma-separated unit allow-list, e.g. USD or USD/shares.",
    )
    mode: ModeName = Field(default="full", description="brief keeps start/end/val/accn/form.")


class CompanyFactsParams(_DateWindow):
    """Input parameters for ``get-company-facts``."""

    cik: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    taxonomies: str | None = Field(
        default=None,
        description="Comma-separated taxonomy allow-list (us-gaap, ifrs-full, dei, srt).",
    )
    tags: str | None = Field(default=None, description="Comma-separated tag allow-list.")
    units: str | None = Field(default=None, description="Comma-separated unit allow-list.")
    mode: ModeName = Field(
        default="full",
        description="brief drops labels and descriptions and abbreviates facts.",
    )


class XbrlFramesParams(_Params):
    """Input parameters for ``get-xbrl-frames``."""

    taxonomy: TaxonomyName = Field(..., description="XBRL taxonomy, e.g. us-gaap.")
    tag: str = Field(..., min_length=1, description="XBRL tag, e.g. Revenues.")
    unit: str = Field(..., min_length=1, description="Unit, e.g. USD or USD/shares.")
    year: int = Field(
        ...,
        ge=MIN_FRAME_YEAR,
        le=MAX_FRAME_YEAR,
        description="Calendar year of the frame.",
    )
    quarter: int | None = Field(
        default=None,
        ge=1,
        le=4,
        description="Quarter 1-4; omit for an annual frame.",
    )
    instantaneous: bool = Field(
        default=False,
        description="Point-in-time facts (balance sheet) instead of durations.",
    )
    ciks: str | None = Field(default=None, description="Comma-separated CIK allow-list.")
    top_n: int | None = Field(
        default=None,
        ge=1,
        description="Number of highest-valued rows to keep.",
    )
    mode: ModeName = Field(default="full", description="brief keeps cik/entityName/val/end.")


class CompanySubmissionsParams(_Params):
    """Input parameters for ``get-company-submissions``."""

    cik: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    page: int = Field(default=1, ge=1, description="1-based page number.")
    page_size: int | None = Field(
        default=None,
        ge=1,
        le=MAX_PAGE_SIZE,
        description=f"Filings per page (1-{MAX_PAGE_SIZE}).",
    )
    form: str | None = Field(
        default=None,
        description="Comma-separated form-type allow-list, e.g. 10-K,10-Q.",
    )


class CompanyFinancialsParams(_Params):
    """Input parameters for ``get-company-financials``."""

    company: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    statements: str = Field(
        default="all",
        description="all, or a comma list of income, balance, cashflow.",
    )
    metrics: bool = Field(default=False, description="Also compute financial ratios.")
    fields: str | None = Field(
        default=None,
        description="Comma-separated top-level keys to keep in the result.",
    )


class CompanyMetricsParams(_Params):
    """Input parameters for ``get-company-metrics``."""

    company: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    metrics: str | None = Field(
        default=None,
        description=(
            "Comma-separated ratio names: grossMargin, netMargin, roe, roa, "
            "currentRatio, debtToEquity. Omit for all."
        ),
    )


class CompareFinancialsParams(_Params):
    """Input parameters for ``compare-financials``."""

    companies: str = Field(
        ...,
        min_length=1,
        description=f"Comma-separated CIKs (at most {MAX_COMPARE_COMPANIES}).",
    )
    statements: str = Field(
        default="income",
        description="all, or a comma list of income, balance, cashflow.",
    )
    metrics: bool = Field(default=True, description="Include ratios for each company.")


class CompareMetricsParams(_Params):
    """Input parameters for ``compare-metrics``."""

    companies: str = Field(
        ...,
        min_length=1,
        description=f"Comma-separated CIKs (at most {MAX_COMPARE_COMPANIES}).",
    )
    metrics: str | None = Field(
        default=None,
        description="Comma-separated ratio names. Omit for all.",
    )


class SubmissionsResourceParams(_Params):
    """Path and query parameters for ``sec://submissions/{cik}{/path*}``."""

    cik: str = Field(..., pattern=_CIK_PATTERN, description="Company CIK (1-10 digits).")
    path: str | None = Field(
        default=None,
        description="Child name: recent, or a paged history file name.",
    )
    page: int = Field(default=1, ge=1, description="1-based page number.")
    page_size: int | None = Field(
        default=None,
        ge=1,
        le=MAX_PAGE_SIZE,
        description=f"Filings per page (1-{MAX_PAGE_SIZE}).",
    )
    form: str | None = Field(default=None, description="Comma-separated form-type allow-list.")
