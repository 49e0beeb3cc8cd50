# src/edgar_relay/dependencies/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Runtime wiring shared by the HTTP app and the line transport."""
