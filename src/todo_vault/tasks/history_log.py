# src/todo_vault/tasks/history_log.py

from __future__ import annotations

import logging
from pathlib import Path

from ..core.jsonio import ensure_json_list, read_json_list, write_json_atomic
from ..core.ports import Clock, IdGenerator
from .task_models import ActionKind, HistoryEntry, Task

logger = logging.getLogger(__name__)


class HistoryLog:
    """
    Append-only record of task mutations, one JSON file per user.

    The whole file is rewritten on every append; an entry becomes visible in
    memory only after that write succeeded.
    """

    def __init__(self, path: str | Path, *, clock: Clock, ids: IdGenerator) -> None:
        self._path = Path(path)
        self._clock = clock
        self._ids = ids
        ensure_json_list(self._path)
        self._entries: list[HistoryEntry] = self._load()
        logger.info("HistoryLog ready file=%s entries=%s", self._path, len(self._entries))

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[HistoryEntry]:
        out: list[HistoryEntry] = []
        for raw in read_json_list(self._path):
            try:
                out.append(HistoryEntry.from_dict(raw))
            except (KeyError, ValueError):
                logger.warning("Skipping malformed history record in %s: %r", self._path, raw)
        return out

    def append(self, kind: ActionKind, details: str, payload: dict[str, Task]) -> HistoryEntry:
        entry = HistoryEntry(
            id=self._ids.new_id("hist"),
            action=kind,
            details=details,
            timestamp=self._clock.now(),
            payload={k: t.copy() for k, t in payload.items()},
        )
        entries = [*self._entries, entry]
        write_json_atomic(self._path, [e.to_dict() for e in entries])
        self._entries = entries
        logger.debug("History appended id=%s action=%s", entry.id, entry.action.value)
        return entry

    def get_recent(self, n: int) -> list[HistoryEntry]:
        """Most recent `n` entries, newest first."""
        if n <= 0:
            return []
        return list(reversed(self._entries[-n:]))

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def count(self) -> int:
        return len(self._entries)
