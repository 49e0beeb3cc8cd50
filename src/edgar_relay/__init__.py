# src/edgar_relay/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Edgar Relay: SEC EDGAR data as MCP tools and resources."""

from __future__ import annotations

__version__ = "1.0.0"
