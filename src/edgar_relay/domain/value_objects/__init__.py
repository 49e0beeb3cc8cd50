# src/edgar_relay/domain/value_objects/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Domain value objects."""

from __future__ import annotations

from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.domain.value_objects.query_options import QueryOptions, split_csv

__all__ = ["Cik", "QueryOptions", "split_csv"]
