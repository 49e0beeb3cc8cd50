# src/edgar_relay/mcp/schemas/envelope.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP envelope schemas.

Purpose:
    Define the request/response envelopes every transport carries, and the
    uniform error shape relay errors are rendered into.

Layer:
    mcp/schemas

Contract:
    - Input: MCPRequest { id?, method, params? }
    - Output: MCPResponse { id, result, error } with exactly one of
      ``result`` / ``error`` set.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from edgar_relay.domain.exceptions.errors import RelayError

RequestId = str | int | None


class MCPError(BaseModel):
    """Standard error shape for relay calls."""

    model_config = ConfigDict(extra="forbid", title="MCPError")

    type: str = Field(
        ...,
        description=(
            "Stable error type (UPSTREAM_UNAVAILABLE, NOT_FOUND, DATA_INTEGRITY, "
            "BAD_INPUT, FATAL, INTERNAL_ERROR)."
        ),
    )
    message: str = Field(..., description="Human-readable error message.")
    retryable: bool = Field(
        ...,
        description="Whether clients should treat this error as retryable.",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Machine-readable diagnostic payload, if any.",
    )

    @classmethod
    def from_exception(cls, exc: RelayError) -> MCPError:
        """Render a relay error into the envelope error shape."""
        return cls(
            type=exc.kind,
            message=exc.message,
            retryable=exc.retryable,
            details=exc.details or None,
        )


class MCPRequest(BaseModel):
    """Generic request envelope.

    Attributes:
        id: Caller-chosen correlation id, echoed in the response.
        method: One of ``tools/list``, ``tools/call``, ``resources/list``,
            ``resources/read``.
        params: Method-specific parameters object.
    """

    model_config = ConfigDict(extra="forbid")

    jsonrpc: str | None = Field(default=None, description="Optional protocol marker, ignored.")
    id: RequestId = Field(default=None, description="Correlation id echoed in the response.")
    method: str = Field(..., min_length=1, description="Envelope method name.")
    params: dict[str, Any] | None = Field(
        default=None,
        description="Method-specific parameters object.",
    )


class MCPResponse(BaseModel):
    """Generic response envelope."""

    model_config = ConfigDict(extra="forbid")

    id: RequestId = Field(default=None, description="Id of the request this answers.")
    result: Any | None = Field(default=None, description="Method-specific result on success.")
    error: MCPError | None = Field(default=None, description="Error payload on failure.")

    @classmethod
    def failure(cls, request_id: RequestId, exc: RelayError) -> MCPResponse:
        return cls(id=request_id, result=None, error=MCPError.from_exception(exc))
