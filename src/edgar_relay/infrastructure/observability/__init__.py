# src/edgar_relay/infrastructure/observability/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Prometheus metrics."""
