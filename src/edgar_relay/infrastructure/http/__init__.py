# src/edgar_relay/infrastructure/http/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""HTTP error envelopes and exception handlers."""
