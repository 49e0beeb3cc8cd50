# src/edgar_relay/domain/exceptions/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Domain exceptions package."""

from __future__ import annotations

from edgar_relay.domain.exceptions.errors import (
    BadInputError,
    DataIntegrityError,
    FatalConfigError,
    InternalError,
    NotFoundError,
    PayloadTooLargeError,
    RelayError,
    UnauthorizedError,
    UpstreamUnavailableError,
)

__all__ = [
    "BadInputError",
    "DataIntegrityError",
    "FatalConfigError",
    "InternalError",
    "NotFoundError",
    "PayloadTooLargeError",
    "RelayError",
    "UnauthorizedError",
    "UpstreamUnavailableError",
]
