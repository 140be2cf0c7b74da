# tests/test_history_log.py

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from todo_vault.core.errors import PersistenceError
from todo_vault.tasks.history_log import HistoryLog
from todo_vault.tasks.task_models import ActionKind, Task

from .fakes import FakeClock, SequentialIds


def _task(tid: str, title: str) -> Task:
    return Task(
        id=tid,
        title=title,
        description="",
        completed=False,
        created_at=datetime(2024, 1, 1, 8, 0, tzinfo=UTC),
    )


def test_append_persists_and_reloads(tmp_path: Path) -> None:
    path = tmp_path / "history_alice.json"
    log = HistoryLog(path, clock=FakeClock(), ids=SequentialIds())

    before = _task("t1", "Buy milk")
    after = _task("t1", "Buy milk")
    after.completed = True
    after.completed_at = datetime(2024, 1, 2, tzinfo=UTC)

    log.append(ActionKind.CREATE, 'Created task: "Buy milk"', {"task": before})
    entry = log.append(ActionKind.COMPLETE, 'Completed task: "Buy milk"', {"before": before, "after": after})

    raw = json.loads(path.read_text("utf-8"))
    assert [r["action"] for r in raw] == ["CREATE", "COMPLETE"]
    assert set(raw[1]) == {"id", "action", "details", "timestamp", "payload"}
    assert set(raw[1]["payload"]) == {"before", "after"}

    reloaded = HistoryLog(path, clock=FakeClock(), ids=SequentialIds())
    assert reloaded.count() == 2
    assert reloaded.entries()[-1] == entry


def test_payload_is_copied_on_append(tmp_path: Path) -> None:
    log = HistoryLog(tmp_path / "h.json", clock=FakeClock(), ids=SequentialIds())
    task = _task("t1", "original")
    entry = log.append(ActionKind.CREATE, "created", {"task": task})

    task.title = "changed later"
    assert entry.task.title == "original"


def test_get_recent_is_newest_first(tmp_path: Path) -> None:
    log = HistoryLog(tmp_path / "h.json", clock=FakeClock(), ids=SequentialIds())
    for i in range(5):
        log.append(ActionKind.CREATE, f"entry {i}", {"task": _task(f"t{i}", str(i))})

    assert [e.details for e in log.get_recent(3)] == ["entry 4", "entry 3", "entry 2"]
    assert len(log.get_recent(50)) == 5
    assert log.get_recent(0) == []
    assert log.get_recent(-2) == []


def test_failed_write_does_not_keep_entry(tmp_path: Path, monkeypatch) -> None:
    log = HistoryLog(tmp_path / "h.json", clock=FakeClock(), ids=SequentialIds())
    log.append(ActionKind.CREATE, "kept", {"task": _task("t1", "a")})

    def boom(*args, **kwargs):
        raise PersistenceError("read-only filesystem")

    monkeypatch.setattr("todo_vault.tasks.history_log.write_json_atomic", boom)
    with pytest.raises(PersistenceError):
        log.append(ActionKind.CREATE, "lost", {"task": _task("t2", "b")})

    assert [e.details for e in log.entries()] == ["kept"]


def test_legacy_entries_without_payload_are_loaded(tmp_path: Path) -> None:
    path = tmp_path / "h.json"
    path.write_text(
        json.dumps(
            [
                {"action": "CREATE", "details": 'Created task: "x"', "timestamp": "2024-01-01T10:00:00.000Z"},
                {"action": "BOGUS", "details": "?", "timestamp": "2024-01-01T10:00:00Z"},
            ]
        ),
        "utf-8",
    )
    log = HistoryLog(path, clock=FakeClock(), ids=SequentialIds())

    assert log.count() == 1
    entry = log.entries()[0]
    assert entry.payload == {}
    assert entry.timestamp == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)


def test_records_without_action_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "h.json"
    path.write_text(
        json.dumps(
            [
                {"details": "no action", "timestamp": "2024-01-01T10:00:00Z"},
                {"action": "", "details": "blank action", "timestamp": "2024-01-01T10:00:00Z"},
                {"action": "remove", "details": "kept", "timestamp": "2024-01-01T10:00:00Z"},
            ]
        ),
        "utf-8",
    )
    log = HistoryLog(path, clock=FakeClock(), ids=SequentialIds())

    assert [(e.action, e.details) for e in log.entries()] == [(ActionKind.REMOVE, "kept")]
