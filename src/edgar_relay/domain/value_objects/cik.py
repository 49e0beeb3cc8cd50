# src/edgar_relay/domain/value_objects/cik.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Central Index Key value object.

Purpose:
    Canonicalize SEC entity identifiers to their fixed-width, zero-padded
    10-digit form. Derived per request and never persisted.

Layer:
    domain/value_objects
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Final

from edgar_relay.domain.exceptions.errors import BadInputError

CIK_WIDTH: Final[int] = 10

_CIK_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]{1,10}$")


@dataclass(frozen=True)
class Cik:
    """Canonical 10-digit CIK.

    Args:
        padded: The zero-padded identifier. Construct through :meth:`parse`
            or :meth:`from_upstream` rather than directly.

    Raises:
        BadInputError: If ``padded`` is not exactly ten ASCII digits.
    """

    padded: str

    def __post_init__(self) -> None:
        """Validate the canonical form."""
        if len(self.padded) != CIK_WIDTH or not _CIK_RE.match(self.padded):
            raise BadInputError(
                "CIK must be exactly 10 digits in canonical form.",
                details={"cik": self.padded},
            )

    @classmethod
    def parse(cls, raw: str) -> Cik:
        """Parse a caller-supplied identifier of 1-10 decimal digits.

        Args:
            raw: Identifier as supplied by a client (whitespace is stripped).

        Returns:
            The canonical :class:`Cik`.

        Raises:
            BadInputError: If ``raw`` is not 1-10 decimal digits.
        """
        candidate = raw.strip() if isinstance(raw, str) else ""
        if not _CIK_RE.match(candidate):
            raise BadInputError(
                "CIK must be 1-10 decimal digits.",
                details={"cik": raw},
            )
        return cls(candidate.zfill(CIK_WIDTH))

    @classmethod
    def from_upstream(cls, value: Any) -> Cik | None:
        """Best-effort conversion of an upstream CIK (int or digit string).

        Returns ``None`` instead of raising so malformed upstream rows degrade
        to "no identifier" rather than failing the request.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str):
            return None
        try:
            return cls.parse(value)
        except BadInputError:
            return None

    def __str__(self) -> str:
        return self.padded
