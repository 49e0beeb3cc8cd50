# src/edgar_relay/domain/enums/taxonomy.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""XBRL taxonomy and output-mode enumerations."""

from __future__ import annotations

from enum import Enum


class Taxonomy(str, Enum):
    """Standards bodies whose vocabularies EDGAR publishes facts under."""

    US_GAAP = "us-gaap"
    IFRS_FULL = "ifrs-full"
    DEI = "dei"
    SRT = "srt"


class OutputMode(str, Enum):
    """Projection size for list-shaped results.

    ``BRIEF`` keeps only identifying fields and values; ``FULL`` keeps every
    field the upstream payload carried.
    """

    BRIEF = "brief"
    FULL = "full"
