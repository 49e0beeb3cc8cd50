# src/edgar_relay/mcp/capabilities/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Tool and resource handlers."""

from edgar_relay.mcp.capabilities.context import CapabilityContext

__all__ = ["CapabilityContext"]
