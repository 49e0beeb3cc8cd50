# src/edgar_relay/domain/enums/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Domain enumerations."""

from __future__ import annotations

from edgar_relay.domain.enums.taxonomy import OutputMode, Taxonomy

__all__ = ["OutputMode", "Taxonomy"]
