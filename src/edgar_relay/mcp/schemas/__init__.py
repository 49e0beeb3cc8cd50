# src/edgar_relay/mcp/schemas/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Envelope and parameter schemas."""

from edgar_relay.mcp.schemas.envelope import MCPError, MCPRequest, MCPResponse

__all__ = ["MCPError", "MCPRequest", "MCPResponse"]
