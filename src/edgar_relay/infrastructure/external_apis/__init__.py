# src/edgar_relay/infrastructure/external_apis/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""External API clients."""
