# src/edgar_relay/tasks/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Operational entry points."""
