# src/edgar_relay/domain/value_objects/query_options.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Per-call query options.

Purpose:
    Carry the immutable configuration bag a single tool or resource call uses
    to filter, reduce and page upstream data.

Layer:
    domain/value_objects

Notes:
    Invariants are enforced in ``__post_init__``; violations raise
    :class:`BadInputError` so they surface as client-facing envelopes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Final

from edgar_relay.domain.enums.taxonomy import OutputMode
from edgar_relay.domain.exceptions.errors import BadInputError

MAX_PAGE_SIZE: Final[int] = 100
DEFAULT_PAGE_SIZE: Final[int] = 20
DEFAULT_TOP_N: Final[int] = 20

_ISO_DATE_RE: Final[re.Pattern[str]] = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_iso_date(value: str | None, field: str) -> None:
    if value is None:
        return
    if not _ISO_DATE_RE.match(value):
        raise BadInputError(
            f"{field} must be an ISO date (YYYY-MM-DD).",
            details={field: value},
        )
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise BadInputError(
            f"{field} is not a valid calendar date.",
            details={field: value},
        ) from exc


def split_csv(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Split a comma-separated string (or iterable of strings) into a set.

    Empty fragments are dropped; surrounding whitespace is stripped.
    """
    if raw is None:
        return frozenset()
    parts = raw.split(",") if isinstance(raw, str) else raw
    return frozenset(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class QueryOptions:
    """Immutable filter / paging options for one call.

    Attributes:
        start_date: Inclusive lower bound on a fact's ``end`` date.
        end_date: Inclusive upper bound on a fact's ``end`` date.
        units: Unit allow-list (exact match); empty means all units.
        tags: Tag allow-list (exact match); empty means all tags.
        taxonomies: Taxonomy allow-list; empty means all taxonomies.
        latest_only: Keep only the single most recent fact per unit.
        page: 1-based page number.
        page_size: Items per page, 1..100.
        mode: Output projection size.
        top_n: Maximum number of ranked rows to keep.
    """

    start_date: str | None = None
    end_date: str | None = None
    units: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()
    taxonomies: frozenset[str] = frozenset()
    latest_only: bool = False
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    mode: OutputMode = OutputMode.FULL
    top_n: int = DEFAULT_TOP_N

    def __post_init__(self) -> None:
        """Validate option invariants."""
        _check_iso_date(self.start_date, "startDate")
        _check_iso_date(self.end_date, "endDate")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise BadInputError(
                "startDate must not be after endDate.",
                details={"startDate": self.start_date, "endDate": self.end_date},
            )
        if self.page < 1:
            raise BadInputError("page must be >= 1.", details={"page": self.page})
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise BadInputError(
                f"pageSize must be between 1 and {MAX_PAGE_SIZE}.",
                details={"pageSize": self.page_size},
            )
        if self.top_n < 1:
            raise BadInputError("topN must be >= 1.", details={"topN": self.top_n})

    @property
    def has_date_window(self) -> bool:
        """Whether either date bound is set."""
        return self.start_date is not None or self.end_date is not None
