# src/edgar_relay/domain/services/normalizer.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Response normalizer for EDGAR JSON payloads.

Purpose:
    Convert the heterogeneous shapes EDGAR returns into filtered, row-oriented
    structures:

    * Columnar (struct-of-arrays) filing history → list of records.
    * Concept ``units`` dictionaries → per-unit filtered fact lists.
    * Company-facts trees (taxonomy → tag → unit) → pruned tree.
    * Frame data → ranked, truncated, optionally abbreviated rows.

Layer:
    domain/services

Notes:
    - Pure functions: no logging, no I/O, no metrics.
    - Empty payloads, missing units and non-numeric values degrade to an empty
      slice. Only structurally impossible input (misaligned columns) raises
      :class:`DataIntegrityError`.
    - ISO-8601 date strings compare correctly as text, so date windows are
      applied lexicographically.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.exceptions.errors import DataIntegrityError
from edgar_relay.domain.services.json_shapes import (
    array_or_empty,
    expect_array,
    expect_object,
    number_or_none,
    object_or_empty,
    string_or_none,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions

__all__ = [
    "BOOLEAN_COLUMNS",
    "pivot_columns",
    "recent_filings",
    "history_file_names",
    "filter_facts",
    "flatten_units",
    "aggregate_company_facts",
    "rank_frame",
]

# Columns EDGAR encodes as 0/1 integers.
BOOLEAN_COLUMNS: Final[frozenset[str]] = frozenset({"isXBRL", "isInlineXBRL"})

BRIEF_FACT_FIELDS: Final[tuple[str, ...]] = ("start", "end", "val", "accn", "form")
BRIEF_FRAME_FIELDS: Final[tuple[str, ...]] = ("cik", "entityName", "val", "end")


# --------------------------------------------------------------------------- #
# Columnar → rows                                                              #
# --------------------------------------------------------------------------- #


def _coerce_cell(column: str, value: Any) -> Any:
    if column in BOOLEAN_COLUMNS and not isinstance(value, bool) and value in (0, 1):
        return bool(value)
    return value


def pivot_columns(columns: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Pivot parallel arrays into row records.

    Args:
        columns: Mapping of field name → array. Every array must have the same
            length ``L``.

    Returns:
        ``L`` records; record ``i`` holds each field's index-``i`` value, with
        0/1-coded boolean columns converted to ``False``/``True``.

    Raises:
        DataIntegrityError: If a column is not an array or the arrays differ in
            length.
    """
    arrays: dict[str, list[Any]] = {
        name: expect_array(values, f"column {name!r}") for name, values in columns.items()
    }
    if not arrays:
        return []

    lengths = {name: len(values) for name, values in arrays.items()}
    if len(set(lengths.values())) > 1:
        raise DataIntegrityError(
            "Columnar arrays have mismatched lengths.",
            details={"lengths": lengths},
        )

    row_count = next(iter(lengths.values()))
    return [
        {name: _coerce_cell(name, values[i]) for name, values in arrays.items()}
        for i in range(row_count)
    ]


def recent_filings(submissions: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Return the ``filings.recent`` section of a submissions payload as rows.

    A payload without a ``filings`` or ``recent`` section has no rows. A
    ``recent`` section that is present but not an object is an integrity error.
    """
    filings = object_or_empty(submissions.get("filings"))
    if "recent" not in filings:
        return []
    recent = expect_object(filings["recent"], "filings.recent")
    return pivot_columns(recent)


def history_file_names(submissions: Mapping[str, Any]) -> list[str]:
    """Return names of the paged filing-history files listed in a submissions payload."""
    filings = object_or_empty(submissions.get("filings"))
    names: list[str] = []
    for entry in array_or_empty(filings.get("files")):
        name = string_or_none(object_or_empty(entry).get("name"))
        if name:
            names.append(name)
    return names


# --------------------------------------------------------------------------- #
# Facts                                                                        #
# --------------------------------------------------------------------------- #


def _in_window(end: str, options: QueryOptions) -> bool:
    if options.start_date is not None and end < options.start_date:
        return False
    if options.end_date is not None and end > options.end_date:
        return False
    return True


def _project_fact(fact: Mapping[str, Any], mode: OutputMode) -> dict[str, Any]:
    if mode is OutputMode.BRIEF:
        return {key: fact[key] for key in BRIEF_FACT_FIELDS if key in fact}
    return dict(fact)


def filter_facts(facts: Any, options: QueryOptions) -> list[dict[str, Any]]:
    """Apply the inclusive date window and latest-only reduction to one unit's facts.

    Args:
        facts: Raw upstream fact array (anything else yields no facts).
        options: Query options.

    Returns:
        The retained facts in upstream order. With ``latest_only`` the result
        has at most one fact: the one with the greatest ``end`` date, ties
        going to the first seen.
    """
    kept: list[Mapping[str, Any]] = []
    for fact in array_or_empty(facts):
        if not isinstance(fact, Mapping):
            continue
        end = string_or_none(fact.get("end"))
        if end is None or not _in_window(end, options):
            continue
        kept.append(fact)

    if options.latest_only and kept:
        latest = kept[0]
        for fact in kept[1:]:
            if fact["end"] > latest["end"]:
                latest = fact
        kept = [latest]

    return [_project_fact(fact, options.mode) for fact in kept]


def flatten_units(units: Any, options: QueryOptions) -> dict[str, list[dict[str, Any]]]:
    """Filter a concept's ``units`` map (unit → facts), dropping units left empty."""
    flattened: dict[str, list[dict[str, Any]]] = {}
    for unit, facts in object_or_empty(units).items():
        if options.units and unit not in options.units:
            continue
        kept = filter_facts(facts, options)
        if kept:
            flattened[unit] = kept
    return flattened


def aggregate_company_facts(facts: Any, options: QueryOptions) -> dict[str, dict[str, Any]]:
    """Reduce a company-facts tree with taxonomy and tag allow-lists.

    Args:
        facts: The ``facts`` member of a companyfacts payload
            (taxonomy → tag → concept).
        options: Query options; ``taxonomies`` and ``tags`` are exact-match
            allow-lists, date window / latest-only / unit filters apply per
            (tag, unit) pair.

    Returns:
        ``{taxonomy: {tag: {"units": {...}, "label"?, "description"?}}}`` with
        empty tags and taxonomies omitted. ``label``/``description`` are kept
        only in ``full`` mode.
    """
    result: dict[str, dict[str, Any]] = {}
    for taxonomy, concepts in object_or_empty(facts).items():
        if options.taxonomies and taxonomy not in options.taxonomies:
            continue
        kept_concepts: dict[str, Any] = {}
        for tag, concept in object_or_empty(concepts).items():
            if options.tags and tag not in options.tags:
                continue
            body = object_or_empty(concept)
            units = flatten_units(body.get("units"), options)
            if not units:
                continue
            entry: dict[str, Any] = {"units": units}
            if options.mode is OutputMode.FULL:
                entry["label"] = string_or_none(body.get("label"))
                entry["description"] = string_or_none(body.get("description"))
            kept_concepts[tag] = entry
        if kept_concepts:
            result[taxonomy] = kept_concepts
    return result


# --------------------------------------------------------------------------- #
# Frames                                                                       #
# --------------------------------------------------------------------------- #


def _rank_key(row: Mapping[str, Any]) -> tuple[int, float | int]:
    # int and float compare exactly; converting big ints to float overflows.
    value = number_or_none(row.get("val"))
    if value is None:
        return (0, 0)
    return (1, value)


def rank_frame(
    data: Any,
    options: QueryOptions,
    *,
    ciks: frozenset[str] | None = None,
) -> tuple[int, list[dict[str, Any]]]:
    """Rank frame rows by value, descending, and keep the top ``options.top_n``.

    Args:
        data: The ``data`` array of a frames payload.
        options: Query options (``top_n`` and ``mode`` are used).
        ciks: Optional allow-list of canonical 10-digit CIKs.

    Returns:
        ``(total, rows)`` where ``total`` counts rows after the CIK filter but
        before truncation. Missing or non-numeric values rank lowest; equal
        values keep upstream order. Row CIKs are 10-digit strings (``None`` if
        the upstream value was unusable).
    """
    rows: list[dict[str, Any]] = []
    for raw in array_or_empty(data):
        if not isinstance(raw, Mapping):
            continue
        row = dict(raw)
        cik = Cik.from_upstream(row.get("cik"))
        row["cik"] = cik.padded if cik is not None else None
        if ciks and row["cik"] not in ciks:
            continue
        rows.append(row)

    # list.sort is stable under reverse=True.
    rows.sort(key=_rank_key, reverse=True)
    top = rows[: options.top_n]

    if options.mode is OutputMode.BRIEF:
        top = [{key: row.get(key) for key in BRIEF_FRAME_FIELDS} for row in top]
    return len(rows), top
