from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from edgar_relay.infrastructure.logging.interaction_log import InteractionLog
from edgar_relay.infrastructure.logging.logger import (
    _JsonFormatter,
    get_request_id,
    get_session_id,
    set_request_context,
)


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("edgar_relay.test", logging.INFO, __file__, 1, "edgar.fetch", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_and_context() -> None:
    set_request_context(request_id="req-1", session_id="sess-1")
    line = _JsonFormatter().format(_record(extra={"endpoint": "submissions", "status": 200}))
    payload = json.loads(line)

    assert payload["message"] == "edgar.fetch"
    assert payload["level"] == "INFO"
    assert payload["endpoint"] == "submissions"
    assert payload["status"] == 200
    assert payload["request_id"] == "req-1"
    assert payload["session_id"] == "sess-1"
    assert get_request_id() == "req-1"
    assert get_session_id() == "sess-1"


def test_set_request_context_is_additive() -> None:
    set_request_context(request_id="a", session_id="s")
    set_request_context(request_id="b")
    assert get_request_id() == "b"
    assert get_session_id() == "s"


def test_interaction_log_appends_to_daily_json_array(tmp_path: Path) -> None:
    moment = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    log = InteractionLog(tmp_path / "logs", clock=lambda: moment)

    log.record(kind="tools/call", name="get-company-facts", arguments={"cik": "320193"}, ok=True)
    log.record(kind="resources/read", name="sec://submissions/320193", arguments=None, ok=False)

    path = tmp_path / "logs" / "2024-03-01.json"
    assert log.path_for(moment) == path
    entries = json.loads(path.read_text(encoding="utf-8"))
    assert [e["name"] for e in entries] == ["get-company-facts", "sec://submissions/320193"]
    assert entries[0]["arguments"] == {"cik": "320193"}
    assert entries[1]["ok"] is False
    assert entries[1]["arguments"] == {}


def test_interaction_log_write_failure_is_logged_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    log = InteractionLog(blocker)

    log.record(kind="tools/call", name="x", arguments={}, ok=True)


def test_interaction_log_moves_unreadable_day_file_aside(tmp_path: Path) -> None:
    moment = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    log = InteractionLog(tmp_path, clock=lambda: moment)
    day_file = tmp_path / "2024-03-01.json"
    day_file.write_text('[{"timestamp": "x", "kind"', encoding="utf-8")

    for name in ("a", "b", "c"):
        log.record(kind="tools/call", name=name, arguments={}, ok=True)

    entries = json.loads(day_file.read_text(encoding="utf-8"))
    assert [e["name"] for e in entries] == ["a", "b", "c"]
    aside = list(tmp_path.glob("2024-03-01.corrupt-*.json"))
    assert len(aside) == 1
    assert aside[0].read_text(encoding="utf-8") == '[{"timestamp": "x", "kind"'
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(["2024-03-01.json", aside[0].name])
