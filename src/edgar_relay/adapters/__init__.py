# src/edgar_relay/adapters/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Transport adapters (HTTP routers and the line transport)."""
