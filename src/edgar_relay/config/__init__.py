# src/edgar_relay/config/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Application configuration."""

from edgar_relay.config.settings import Environment, Settings, get_settings

__all__ = ["Environment", "Settings", "get_settings"]
