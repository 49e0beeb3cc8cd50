# src/edgar_relay/adapters/transports/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Non-HTTP transports."""
