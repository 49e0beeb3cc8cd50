# src/edgar_relay/mcp/capabilities/context.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Shared handler dependencies."""

from __future__ import annotations

from dataclasses import dataclass

from edgar_relay.config.settings import Settings
from edgar_relay.infrastructure.external_apis.edgar.client import EdgarClient


@dataclass(frozen=True)
class CapabilityContext:
    """Upstream client plus the result-shaping thresholds handlers apply.

    Attributes:
        client: Upstream EDGAR client.
        max_payload_bytes: Size-guard ceiling.
        default_page_size: Page size when a call does not pass one.
        default_top_n: Frame row count when a call does not pass one.
    """

    client: EdgarClient
    max_payload_bytes: int = 100_000
    default_page_size: int = 20
    default_top_n: int = 20

    @classmethod
    def from_settings(cls, client: EdgarClient, settings: Settings) -> CapabilityContext:
        return cls(
            client=client,
            max_payload_bytes=settings.max_payload_bytes,
            default_page_size=settings.default_page_size,
            default_top_n=settings.default_top_n,
        )
