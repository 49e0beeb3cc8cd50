# src/edgar_relay/infrastructure/__init__.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Infrastructure: upstream transport, logging, observability and HTTP plumbing."""
