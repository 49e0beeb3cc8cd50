# src/edgar_relay/adapters/routers/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""HTTP routers."""
