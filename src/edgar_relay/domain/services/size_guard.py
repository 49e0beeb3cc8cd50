# src/edgar_relay/domain/services/size_guard.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Payload size guard and pagination.

Purpose:
    Keep results within a serialized-size ceiling. Oversized payloads are never
    returned partially; the caller receives a structured advisory with concrete
    narrowing suggestions instead. List-shaped results (filing history) are
    paged rather than guarded.

Layer:
    domain/services
"""

from __future__ import annotations

import json
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final, TypeVar

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.exceptions.errors import PayloadTooLargeError
from edgar_relay.domain.value_objects.query_options import QueryOptions

__all__ = [
    "Page",
    "paginate",
    "measure_bytes",
    "guard_payload",
    "suggest_narrowing",
    "ADVISORY_STATUS",
]

T = TypeVar("T")

ADVISORY_STATUS: Final[str] = "payload_too_large"

# Narrowing levers a handler can offer; see suggest_narrowing().
LEVER_TAGS: Final[str] = "tags"
LEVER_LATEST: Final[str] = "latestOnly"
LEVER_DATES: Final[str] = "dates"
LEVER_PAGE_SIZE: Final[str] = "pageSize"
LEVER_TOP_N: Final[str] = "topN"
LEVER_MODE: Final[str] = "mode"
LEVER_UNITS: Final[str] = "units"


@dataclass(frozen=True)
class Page:
    """One page of a list result."""

    items: list[Any]
    page: int
    page_size: int
    total: int
    total_pages: int

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation (camelCase keys)."""
        return {
            "items": self.items,
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    """Slice ``items`` into a 1-based page.

    ``totalPages`` is ``ceil(total / page_size)``. Pages past the end yield an
    empty slice, not an error.
    """
    total = len(items)
    start = (page - 1) * page_size
    window = list(items[start : start + page_size]) if start < total else []
    return Page(
        items=window,
        page=page,
        page_size=page_size,
        total=total,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


def measure_bytes(payload: Any) -> int:
    """Return the size of ``payload`` as compact UTF-8 JSON."""
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)
    return len(text.encode("utf-8"))


def suggest_narrowing(options: QueryOptions, levers: Sequence[str]) -> list[str]:
    """Build concrete narrowing suggestions from the levers not yet pulled.

    Args:
        options: The options the oversized call was made with.
        levers: Levers the calling tool supports (``LEVER_*`` constants), in
            the order suggestions should appear.
    """
    suggestions: list[str] = []
    for lever in levers:
        if lever == LEVER_TAGS and not options.tags:
            suggestions.append("Add a tag filter (e.g. tags=Revenues,NetIncomeLoss).")
        elif lever == LEVER_UNITS and not options.units:
            suggestions.append("Restrict units (e.g. units=USD).")
        elif lever == LEVER_LATEST and not options.latest_only:
            suggestions.append("Enable latestOnly=true to keep one fact per unit.")
        elif lever == LEVER_DATES:
            if options.has_date_window:
                suggestions.append("Shrink the startDate/endDate window.")
            else:
                suggestions.append("Add a startDate/endDate window (YYYY-MM-DD).")
        elif lever == LEVER_PAGE_SIZE and options.page_size > 1:
            suggestions.append(f"Reduce pageSize (currently {options.page_size}).")
        elif lever == LEVER_TOP_N and options.top_n > 1:
            suggestions.append(f"Lower topN (currently {options.top_n}).")
        elif lever == LEVER_MODE and options.mode is not OutputMode.BRIEF:
            suggestions.append("Use mode=brief for abbreviated rows.")
    return suggestions


def guard_payload(payload: Any, *, limit_bytes: int, suggestions: Sequence[str]) -> Any:
    """Return ``payload`` if it fits under ``limit_bytes``, else an advisory.

    Args:
        payload: Normalized, JSON-serializable result.
        limit_bytes: Serialized-size ceiling.
        suggestions: Narrowing suggestions to include in the advisory.

    Returns:
        Either the payload unchanged or a dict with ``status``, ``message``,
        ``sizeBytes``, ``limitBytes`` and ``suggestions``. The oversized
        payload itself never appears in the advisory.
    """
    size = measure_bytes(payload)
    if size <= limit_bytes:
        return payload
    return {
        "status": ADVISORY_STATUS,
        "kind": PayloadTooLargeError.kind,
        "message": (
            f"Result is {size} bytes, above the {limit_bytes}-byte limit. "
            "Narrow the query and try again."
        ),
        "sizeBytes": size,
        "limitBytes": limit_bytes,
        "suggestions": list(suggestions),
    }
