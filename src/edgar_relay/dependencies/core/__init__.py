# src/edgar_relay/dependencies/core/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Core bootstrap."""
