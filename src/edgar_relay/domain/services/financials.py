# src/edgar_relay/domain/services/financials.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Latest-value financial statement summaries and ratios.

Purpose:
    Map a curated set of us-gaap tags ("core tags") to friendly field names,
    pick each tag's most recent USD value from a company-facts payload, group
    the values into income / balance / cash-flow statements and derive simple
    ratios.

Layer:
    domain/services

Notes:
    - Pure functions; missing tags simply leave their field as ``None``.
    - A ratio is emitted only when all its inputs are present and its
      denominator is non-zero.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from edgar_relay.domain.enums.taxonomy import Taxonomy
from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.domain.services.json_shapes import number_or_none, object_or_empty
from edgar_relay.domain.services.normalizer import filter_facts
from edgar_relay.domain.value_objects.query_options import QueryOptions

# us-gaap tag → friendly field name.
CORE_TAGS: Final[Mapping[str, str]] = {
    # Income statement
    "RevenueFromContractWithCustomerExcludingAssessedTax": "revenue",
    "CostOfRevenue": "costOfRevenue",
    "GrossProfit": "grossProfit",
    "OperatingExpenses": "operatingExpenses",
    "OperatingIncomeLoss": "operatingIncome",
    "NetIncomeLoss": "netIncome",
    "EarningsPerShareBasic": "epsBasic",
    "EarningsPerShareDiluted": "epsDiluted",
    # Balance sheet
    "Assets": "totalAssets",
    "AssetsCurrent": "currentAssets",
    "Liabilities": "totalLiabilities",
    "LiabilitiesCurrent": "currentLiabilities",
    "StockholdersEquity": "shareholdersEquity",
    "CashAndCashEquivalentsAtCarryingValue": "cash",
    # Cash flow
    "NetCashProvidedByUsedInOperatingActivities": "operatingCashFlow",
    "PaymentsToAcquirePropertyPlantAndEquipment": "capitalExpenditures",
}

STATEMENT_FIELDS: Final[Mapping[str, tuple[str, ...]]] = {
    "income": (
        "revenue",
        "costOfRevenue",
        "grossProfit",
        "operatingExpenses",
        "operatingIncome",
        "netIncome",
        "epsBasic",
        "epsDiluted",
    ),
    "balance": (
        "totalAssets",
        "currentAssets",
        "cash",
        "totalLiabilities",
        "currentLiabilities",
        "shareholdersEquity",
    ),
    "cashflow": ("operatingCashFlow", "capitalExpenditures"),
}

# Per-share tags are reported in a composite unit rather than plain USD.
_UNIT_PREFERENCE: Final[tuple[str, ...]] = ("USD", "USD/shares")

_LATEST: Final[QueryOptions] = QueryOptions(latest_only=True)


@dataclass(frozen=True)
class RatioSpec:
    """One derived ratio: its inputs and formula."""

    name: str
    inputs: tuple[str, ...]
    formula: Callable[[Mapping[str, float]], float]
    description: str


def _pct(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100


RATIOS: Final[tuple[RatioSpec, ...]] = (
    RatioSpec(
        "grossMargin",
        ("revenue", "costOfRevenue"),
        lambda v: _pct(v["revenue"] - v["costOfRevenue"], v["revenue"]),
        "(revenue - costOfRevenue) / revenue, percent",
    ),
    RatioSpec(
        "netMargin",
        ("netIncome", "revenue"),
        lambda v: _pct(v["netIncome"], v["revenue"]),
        "netIncome / revenue, percent",
    ),
    RatioSpec(
        "roe",
        ("netIncome", "shareholdersEquity"),
        lambda v: _pct(v["netIncome"], v["shareholdersEquity"]),
        "netIncome / shareholdersEquity, percent",
    ),
    RatioSpec(
        "roa",
        ("netIncome", "totalAssets"),
        lambda v: _pct(v["netIncome"], v["totalAssets"]),
        "netIncome / totalAssets, percent",
    ),
    RatioSpec(
        "currentRatio",
        ("currentAssets", "currentLiabilities"),
        lambda v: v["currentAssets"] / v["currentLiabilities"],
        "currentAssets / currentLiabilities",
    ),
    RatioSpec(
        "debtToEquity",
        ("totalLiabilities", "shareholdersEquity"),
        lambda v: v["totalLiabilities"] / v["shareholdersEquity"],
        "totalLiabilities / shareholdersEquity",
    ),
)

RATIO_NAMES: Final[tuple[str, ...]] = tuple(spec.name for spec in RATIOS)


def latest_core_values(company_facts: Mapping[str, Any]) -> dict[str, float | int | None]:
    """Return the latest numeric value of every core tag, keyed by friendly name."""
    us_gaap = object_or_empty(object_or_empty(company_facts.get("facts")).get(Taxonomy.US_GAAP.value))
    values: dict[str, float | int | None] = {}
    for tag, field in CORE_TAGS.items():
        units = object_or_empty(object_or_empty(us_gaap.get(tag)).get("units"))
        value: float | int | None = None
        for unit in _UNIT_PREFERENCE:
            latest = filter_facts(units.get(unit), _LATEST)
            if latest:
                value = number_or_none(latest[0].get("val"))
                break
        values[field] = value
    return values


def parse_statements(raw: str | None) -> tuple[str, ...]:
    """Parse a ``statements`` selector (``all`` or a comma list).

    Raises:
        BadInputError: On an unknown statement name.
    """
    if raw is None or raw.strip() in ("", "all"):
        return tuple(STATEMENT_FIELDS)
    names = tuple(dict.fromkeys(p.strip() for p in raw.split(",") if p.strip()))
    unknown = [n for n in names if n not in STATEMENT_FIELDS]
    if unknown:
        raise BadInputError(
            "Unknown statement name.",
            details={"unknown": unknown, "allowed": ["all", *STATEMENT_FIELDS]},
        )
    return names


def group_statements(
    values: Mapping[str, float | int | None],
    statements: Iterable[str],
) -> dict[str, dict[str, float | int | None]]:
    """Group friendly-name values into the requested statements."""
    return {
        statement: {field: values.get(field) for field in STATEMENT_FIELDS[statement]}
        for statement in statements
    }


def compute_ratios(
    values: Mapping[str, float | int | None],
    only: Iterable[str] | None = None,
) -> dict[str, float]:
    """Compute the derivable ratios.

    Args:
        values: Friendly-name values from :func:`latest_core_values`.
        only: Optional subset of ratio names; unknown names are ignored.

    Returns:
        Ratio name → value rounded to four decimals. Ratios with missing inputs
        or a zero denominator are omitted.
    """
    wanted = set(only) if only is not None else set(RATIO_NAMES)
    ratios: dict[str, float] = {}
    for spec in RATIOS:
        if spec.name not in wanted:
            continue
        inputs = {name: values.get(name) for name in spec.inputs}
        if any(v is None for v in inputs.values()):
            continue
        numeric = {name: float(v) for name, v in inputs.items() if v is not None}
        try:
            ratios[spec.name] = round(spec.formula(numeric), 4)
        except ZeroDivisionError:
            continue
    return ratios
