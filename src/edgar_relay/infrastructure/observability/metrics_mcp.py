# src/edgar_relay/infrastructure/observability/metrics_mcp.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Dispatch and session metrics.

Purpose:
    Count tool/resource calls by outcome, record dispatch latency and track
    the number of open push-stream sessions.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

_mcp_calls_total: Counter | None = None
_mcp_call_latency_seconds: Histogram | None = None
_mcp_open_sessions: Gauge | None = None
_mcp_advisories_total: Counter | None = None


def get_mcp_calls_total() -> Counter:
    """Return (and lazily create) the call counter (method, outcome)."""
    global _mcp_calls_total
    if _mcp_calls_total is None:
        _mcp_calls_total = Counter(
            "edgar_relay_calls_total",
            "Dispatched envelope calls by method and outcome.",
            ["method", "outcome"],
        )
    return _mcp_calls_total


def get_mcp_call_latency_seconds() -> Histogram:
    """Return (and lazily create) the dispatch latency histogram."""
    global _mcp_call_latency_seconds
    if _mcp_call_latency_seconds is None:
        _mcp_call_latency_seconds = Histogram(
            "edgar_relay_call_latency_seconds",
            "Latency of dispatched envelope calls in seconds.",
            ["method"],
        )
    return _mcp_call_latency_seconds


def get_mcp_open_sessions() -> Gauge:
    """Return (and lazily create) the open-session gauge."""
    global _mcp_open_sessions
    if _mcp_open_sessions is None:
        _mcp_open_sessions = Gauge(
            "edgar_relay_open_sessions",
            "Number of open push-stream sessions.",
        )
    return _mcp_open_sessions


def get_mcp_advisories_total() -> Counter:
    """Return (and lazily create) the payload-too-large advisory counter."""
    global _mcp_advisories_total
    if _mcp_advisories_total is None:
        _mcp_advisories_total = Counter(
            "edgar_relay_payload_advisories_total",
            "Results replaced by a payload-too-large advisory, by tool (or \"resource\").",
            ["name"],
        )
    return _mcp_advisories_total
