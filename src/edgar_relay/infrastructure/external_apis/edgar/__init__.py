# src/edgar_relay/infrastructure/external_apis/edgar/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""SEC EDGAR request builder and transport client."""

from edgar_relay.infrastructure.external_apis.edgar.client import EdgarClient

__all__ = ["EdgarClient"]
