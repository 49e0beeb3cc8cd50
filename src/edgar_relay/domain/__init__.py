# src/edgar_relay/domain/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Domain layer: value objects, error taxonomy and pure shaping services."""
