# src/edgar_relay/mcp/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""MCP-style tool/resource layer: registry, dispatch and sessions."""
