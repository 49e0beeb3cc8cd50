# src/edgar_relay/infrastructure/external_apis/edgar/paths.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""EDGAR request builder.

Purpose:
    Map a logical query (entity, taxonomy, tag, unit, period) to the canonical
    upstream resource path, relative to the EDGAR base URL.

Layer:
    infrastructure/external_apis/edgar

Notes:
    - Pure functions. Identifiers arrive already validated (``Cik`` value
      objects, range-checked year/quarter), so builders only format.
    - Path segments are percent-encoded with no safe characters; a ``/`` in a
      composite unit (``USD/shares``) is first rewritten to ``-per-`` as
      EDGAR's frames API expects.
"""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import quote

from edgar_relay.domain.exceptions.errors import BadInputError
from edgar_relay.domain.value_objects.cik import Cik

MIN_FRAME_YEAR: Final[int] = 1900
MAX_FRAME_YEAR: Final[int] = 2100

# CIK##########.json and CIK##########-submissions-###.json
_SUBMISSIONS_FILE_RE: Final[re.Pattern[str]] = re.compile(r"^CIK\d{10}(-submissions-\d{3})?\.json$")


def _segment(value: str) -> str:
    return quote(value, safe="")


def unit_segment(unit: str) -> str:
    """Encode a unit for a frames path (``USD/shares`` → ``USD-per-shares``)."""
    return _segment(unit.replace("/", "-per-"))


def submissions_path(cik: Cik) -> str:
    """``/submissions/CIK##########.json``"""
    return f"/submissions/CIK{cik.padded}.json"


def submissions_file_path(name: str) -> str:
    """Path of a paged filing-history file listed under ``filings.files``.

    Raises:
        BadInputError: If ``name`` is not a submissions file name.
    """
    if not _SUBMISSIONS_FILE_RE.match(name):
        raise BadInputError(
            "Not a submissions history file name.",
            details={"name": name},
        )
    return f"/submissions/{name}"


def company_facts_path(cik: Cik) -> str:
    """``/api/xbrl/companyfacts/CIK##########.json``"""
    return f"/api/xbrl/companyfacts/CIK{cik.padded}.json"


def company_concept_path(cik: Cik, taxonomy: str, tag: str) -> str:
    """``/api/xbrl/companyconcept/CIK##########/<taxonomy>/<tag>.json``"""
    return f"/api/xbrl/companyconcept/CIK{cik.padded}/{_segment(taxonomy)}/{_segment(tag)}.json"


def frame_period(year: int, quarter: int | None = None, instantaneous: bool = False) -> str:
    """Build a frame period code ``CY<year>[Q<quarter>][I]``.

    Args:
        year: Calendar year, 1900..2100.
        quarter: Optional quarter 1..4; ``None`` selects an annual frame.
        instantaneous: Append ``I`` for point-in-time (balance sheet) facts.

    Raises:
        BadInputError: If ``year`` or ``quarter`` is out of range.
    """
    if not MIN_FRAME_YEAR <= year <= MAX_FRAME_YEAR:
        raise BadInputError(
            f"year must be between {MIN_FRAME_YEAR} and {MAX_FRAME_YEAR}.",
            details={"year": year},
        )
    if quarter is not None and not 1 <= quarter <= 4:
        raise BadInputError("quarter must be between 1 and 4.", details={"quarter": quarter})
    code = f"CY{year}"
    if quarter is not None:
        code += f"Q{quarter}"
    if instantaneous:
        code += "I"
    return code


def frame_path(taxonomy: str, tag: str, unit: str, period: str) -> str:
    """``/api/xbrl/frames/<taxonomy>/<tag>/<unit>/<period>.json``"""
    return (
        f"/api/xbrl/frames/{_segment(taxonomy)}/{_segment(tag)}/"
        f"{unit_segment(unit)}/{_segment(period)}.json"
    )
