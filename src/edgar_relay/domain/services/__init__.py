# src/edgar_relay/domain/services/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Pure domain services: normalization, size guarding and financial summaries."""
