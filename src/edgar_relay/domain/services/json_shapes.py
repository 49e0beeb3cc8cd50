# src/edgar_relay/domain/services/json_shapes.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Tagged JSON value kinds and shape checks.

Purpose:
    Classify decoded JSON values into an explicit set of kinds and provide
    narrowing helpers, so a shape mismatch in an upstream payload becomes a
    typed :class:`DataIntegrityError` (or an empty slice, where degrading is
    the contract) rather than an ``AttributeError`` deep in the normalizer.

Layer:
    domain/services
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from edgar_relay.domain.exceptions.errors import DataIntegrityError

__all__ = [
    "JsonKind",
    "json_kind",
    "expect_object",
    "expect_array",
    "object_or_empty",
    "array_or_empty",
    "string_or_none",
    "number_or_none",
]


class JsonKind(str, Enum):
    """Kinds of decoded JSON values."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    """Return the :class:`JsonKind` of a decoded JSON value.

    Raises:
        DataIntegrityError: If ``value`` is not something ``json.loads`` can
            produce.
    """
    if value is None:
        return JsonKind.NULL
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    raise DataIntegrityError(
        "Value is not a JSON value.",
        details={"python_type": type(value).__name__},
    )


def expect_object(value: Any, where: str) -> Mapping[str, Any]:
    """Narrow ``value`` to a JSON object or raise :class:`DataIntegrityError`."""
    kind = json_kind(value)
    if kind is not JsonKind.OBJECT:
        raise DataIntegrityError(
            f"Expected a JSON object at {where}.",
            details={"where": where, "kind": kind.value},
        )
    return value


def expect_array(value: Any, where: str) -> list[Any]:
    """Narrow ``value`` to a JSON array or raise :class:`DataIntegrityError`."""
    kind = json_kind(value)
    if kind is not JsonKind.ARRAY:
        raise DataIntegrityError(
            f"Expected a JSON array at {where}.",
            details={"where": where, "kind": kind.value},
        )
    return value


def object_or_empty(value: Any) -> Mapping[str, Any]:
    """Return ``value`` if it is a JSON object, else an empty mapping."""
    return value if isinstance(value, Mapping) else {}


def array_or_empty(value: Any) -> list[Any]:
    """Return ``value`` if it is a JSON array, else an empty list."""
    return value if isinstance(value, list) else []


def string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def number_or_none(value: Any) -> float | int | None:
    """Return a finite JSON number, else ``None``.

    Booleans, strings and NaN/inf are not numbers for ranking purposes.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
