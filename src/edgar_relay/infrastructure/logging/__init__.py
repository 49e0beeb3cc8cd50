# src/edgar_relay/infrastructure/logging/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Structured logging."""
