# src/edgar_relay/infrastructure/logging/interaction_log.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Append-only daily interaction logs.

Purpose:
    Record every dispatched call as one entry in ``<dir>/<YYYY-MM-DD>.json``,
    a JSON array that grows through the day.

Layer:
    infrastructure/logging

Notes:
    - Writes run synchronously on the event loop thread, so entries from
      concurrent calls never interleave within a file.
    - Each write goes to a temporary file that replaces the day file, so a
      crash mid-write never leaves a truncated array behind.
    - A day file that does not parse is moved aside as
      ``<day>.corrupt-<timestamp>.json`` and a fresh array is started.
    - A failed write is logged and swallowed; interaction logging must never
      fail the call it describes.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from edgar_relay.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class InteractionLog:
    """Daily JSON-array log of dispatched calls."""

    def __init__(self, directory: str | Path, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._directory = Path(directory)
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, moment: datetime) -> Path:
        """Return the file holding entries for ``moment``'s UTC day."""
        return self._directory / f"{moment.date().isoformat()}.json"

    def record(
        self,
        *,
        kind: str,
        name: str,
        arguments: Mapping[str, Any] | None,
        ok: bool,
    ) -> None:
        """Append one entry to today's file.

        Args:
            kind: Envelope method (``tools/call``, ``resources/read`` ...).
            name: Tool name or resource URI.
            arguments: Call arguments as received.
            ok: Whether the call produced a result rather than an error.
        """
        now = self._clock()
        entry = {
            "timestamp": now.isoformat(),
            "kind": kind,
            "name": name,
            "arguments": dict(arguments or {}),
            "ok": ok,
        }
        path = self.path_for(now)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            entries = self._load(path, now)
            entries.append(entry)
            self._replace(path, json.dumps(entries, ensure_ascii=False, indent=2, default=str))
        except (OSError, ValueError) as exc:
            logger.warning(
                "interaction_log.write_failed",
                extra={"extra": {"path": str(path), "error": str(exc)}},
            )

    def _load(self, path: Path, now: datetime) -> list[Any]:
        if not path.exists():
            return []
        try:
            loaded = json.loads(path.read_text(encoding="utf-8") or "[]")
        except ValueError:
            loaded = None
        if isinstance(loaded, list):
            return loaded
        aside = path.with_name(f"{path.stem}.corrupt-{now.strftime('%Y%m%dT%H%M%S%f')}.json")
        os.replace(path, aside)
        logger.warning(
            "interaction_log.corrupt_file",
            extra={"extra": {"path": str(path), "moved_to": str(aside)}},
        )
        return []

    def _replace(self, path: Path, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=self._directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
