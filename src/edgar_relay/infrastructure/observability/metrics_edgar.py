# src/edgar_relay/infrastructure/observability/metrics_edgar.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""EDGAR metrics.

Purpose:
    Provide Prometheus metrics for upstream EDGAR calls:
      * Latency histograms.
      * Error counters by reason.
      * HTTP status distribution.
      * Response size histograms.

Design:
    Functions return lazily created singleton metric instances so importing
    the module twice (or rebuilding the app in tests) never registers a
    collector twice.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_edgar_latency_seconds: Histogram | None = None
_edgar_errors_total: Counter | None = None
_edgar_http_status_total: Counter | None = None
_edgar_response_bytes: Histogram | None = None


def get_edgar_latency_seconds() -> Histogram:
    """Return (and lazily create) the EDGAR call latency histogram."""
    global _edgar_latency_seconds
    if _edgar_latency_seconds is None:
        _edgar_latency_seconds = Histogram(
            "edgar_relay_upstream_latency_seconds",
            "Latency of upstream EDGAR calls in seconds.",
            ["endpoint", "outcome"],
        )
    return _edgar_latency_seconds


def get_edgar_errors_total() -> Counter:
    """Return (and lazily create) the EDGAR error counter."""
    global _edgar_errors_total
    if _edgar_errors_total is None:
        _edgar_errors_total = Counter(
            "edgar_relay_upstream_errors_total",
            "Total number of failed upstream EDGAR calls.",
            ["endpoint", "reason"],
        )
    return _edgar_errors_total


def get_edgar_http_status_total() -> Counter:
    """Return (and lazily create) the EDGAR HTTP status counter."""
    global _edgar_http_status_total
    if _edgar_http_status_total is None:
        _edgar_http_status_total = Counter(
            "edgar_relay_upstream_http_status_total",
            "Upstream EDGAR HTTP responses by status code.",
            ["endpoint", "status"],
        )
    return _edgar_http_status_total


def get_edgar_response_bytes() -> Histogram:
    """Return (and lazily create) the EDGAR response-bytes histogram."""
    global _edgar_response_bytes
    if _edgar_response_bytes is None:
        _edgar_response_bytes = Histogram(
            "edgar_relay_upstream_response_bytes",
            "Size of upstream EDGAR responses in bytes.",
            ["endpoint"],
            buckets=(1e3, 1e4, 1e5, 1e6, 5e6, 2e7, 1e8),
        )
    return _edgar_response_bytes
