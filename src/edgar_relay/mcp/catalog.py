# src/edgar_relay/mcp/catalog.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Tool and resource catalog.

Purpose:
    Bind every capability to its descriptor and build the registry once at
    startup.

Exposed tools:
    - get-company-concept
    - get-company-facts
    - get-xbrl-frames
    - get-company-submissions
    - get-company-financials
    - get-company-metrics
    - compare-financials
    - compare-metrics

Exposed resources:
    - sec://submissions/{cik}{/path*}
    - sec://xbrl/facts/{cik}
    - sec://xbrl/concept/{cik}/{taxonomy}/{tag}
"""

from __future__ import annotations

from functools import partial

from edgar_relay.mcp.capabilities.company_concept import company_concept
from edgar_relay.mcp.capabilities.company_facts import company_facts
from edgar_relay.mcp.capabilities.company_financials import (
    company_financials,
    company_metrics,
    compare_financials,
    compare_metrics,
)
from edgar_relay.mcp.capabilities.company_submissions import (
    company_submissions,
    submissions_resource,
)
from edgar_relay.mcp.capabilities.context import CapabilityContext
from edgar_relay.mcp.capabilities.xbrl_frames import xbrl_frames
from edgar_relay.mcp.registry import (
    Registry,
    ResourceBinding,
    ResourceDescriptor,
    ToolBinding,
    ToolDescriptor,
)
from edgar_relay.mcp.schemas.params import (
    CompanyConceptParams,
    CompanyFactsParams,
    CompanyFinancialsParams,
    CompanyMetricsParams,
    CompanySubmissionsParams,
    CompareFinancialsParams,
    CompareMetricsParams,
    SubmissionsResourceParams,
    XbrlFramesParams,
)


def build_registry(ctx: CapabilityContext) -> Registry:
    """Return the registry with every tool and resource bound to ``ctx``."""
    tools = [
        ToolBinding(
            ToolDescriptor(
                "get-company-concept",
                "Facts for one XBRL concept of one company, grouped by unit, with "
                "optional date window, unit filter and latest-only reduction.",
                CompanyConceptParams,
            ),
            partial(company_concept, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "get-company-facts",
                "All XBRL facts of one company, reduced by taxonomy/tag/unit "
                "allow-lists, date window and latest-only. Oversized results "
                "return narrowing suggestions instead of data.",
                CompanyFactsParams,
            ),
            partial(company_facts, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "get-xbrl-frames",
                "One fact per reporting company for a calendar period "
                "(CY<year>[Q<n>][I]), ranked by value and truncated to topN.",
                XbrlFramesParams,
            ),
            partial(xbrl_frames, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "get-company-submissions",
                "Paginated recent filing history of one company, optionally "
                "filtered by form type.",
                CompanySubmissionsParams,
            ),
            partial(company_submissions, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "get-company-financials",
                "Latest income, balance sheet and cash-flow figures of one "
                "company, with optional ratios.",
                CompanyFinancialsParams,
            ),
            partial(company_financials, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "get-company-metrics",
                "Financial ratios (margins, ROE, ROA, current ratio, "
                "debt-to-equity) of one company.",
                CompanyMetricsParams,
            ),
            partial(company_metrics, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "compare-financials",
                "Side-by-side latest financial statements of several companies.",
                CompareFinancialsParams,
            ),
            partial(compare_financials, ctx=ctx),
        ),
        ToolBinding(
            ToolDescriptor(
                "compare-metrics",
                "Side-by-side financial ratios of several companies.",
                CompareMetricsParams,
            ),
            partial(compare_metrics, ctx=ctx),
        ),
    ]

    resources = [
        ResourceBinding(
            ResourceDescriptor(
                "company-submissions",
                "sec://submissions/{cik}{/path*}",
                "Filing history browser: no path lists children, 'recent' pages "
                "recent filings, a history file name pages that file.",
                SubmissionsResourceParams,
            ),
            partial(submissions_resource, ctx=ctx),
        ),
        ResourceBinding(
            ResourceDescriptor(
                "company-facts",
                "sec://xbrl/facts/{cik}",
                "Company facts; accepts the get-company-facts filters as query parameters.",
                CompanyFactsParams,
            ),
            partial(company_facts, ctx=ctx),
        ),
        ResourceBinding(
            ResourceDescriptor(
                "company-concept",
                "sec://xbrl/concept/{cik}/{taxonomy}/{tag}",
                "One concept of one company; accepts the get-company-concept "
                "filters as query parameters.",
                CompanyConceptParams,
            ),
            partial(company_concept, ctx=ctx),
        ),
    ]

    return Registry(tools, resources)
