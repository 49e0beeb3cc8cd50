# src/edgar_relay/domain/exceptions/errors.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Relay error taxonomy.

Purpose:
    Provide the closed set of error kinds every component-level fault is
    converted into before it reaches a caller. Each kind carries a stable
    machine-readable ``kind`` string used in response envelopes.

Layer:
    domain

Notes:
    - Only :class:`FatalConfigError` may terminate the process.
    - ``PAYLOAD_TOO_LARGE`` exists as a kind for logging and metrics; the
      size guard answers with an advisory result instead of raising.
"""

from __future__ import annotations

from typing import Any, ClassVar

__all__ = [
    "RelayError",
    "UpstreamUnavailableError",
    "DataIntegrityError",
    "BadInputError",
    "PayloadTooLargeError",
    "NotFoundError",
    "FatalConfigError",
    "InternalError",
    "UnauthorizedError",
]


class RelayError(Exception):
    """Base class for relay errors.

    Attributes:
        kind:
            Stable error type exposed to clients (e.g. ``BAD_INPUT``).
        retryable:
            Whether clients may reasonably retry the same call later.
        message:
            Human-readable error message (safe for clients).
        details:
            Optional machine-readable diagnostic payload.
    """

    kind: ClassVar[str] = "INTERNAL_ERROR"
    retryable: ClassVar[bool] = False

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize a relay error.

        Args:
            message: Human-readable error message describing the failure.
            details: Optional structured diagnostic payload, safe to log and to
                surface to clients.
        """
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        """Return the human-readable message for this error."""
        return self.message


class UpstreamUnavailableError(RelayError):
    """Raised when the upstream data provider cannot be reached or answers non-2xx."""

    kind = "UPSTREAM_UNAVAILABLE"
    retryable = True


class DataIntegrityError(RelayError):
    """Raised when an upstream payload has an impossible shape (e.g. misaligned columns)."""

    kind = "DATA_INTEGRITY"


class BadInputError(RelayError):
    """Raised when tool or resource arguments fail validation."""

    kind = "BAD_INPUT"


class PayloadTooLargeError(RelayError):
    """Kind marker for payloads above the configured size ceiling."""

    kind = "PAYLOAD_TOO_LARGE"


class NotFoundError(RelayError):
    """Raised for unknown tools, resources, sessions or upstream 404s."""

    kind = "NOT_FOUND"


class FatalConfigError(RelayError):
    """Raised when required configuration is missing at startup."""

    kind = "FATAL"


class InternalError(RelayError):
    """Wraps an unexpected handler fault so it never crosses the registry raw."""

    kind = "INTERNAL_ERROR"


class UnauthorizedError(RelayError):
    """Raised by the HTTP transport when the shared-secret header is missing or wrong."""

    kind = "UNAUTHORIZED"
