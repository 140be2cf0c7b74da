# src/todo_vault/tasks/undo.py

from __future__ import annotations

import logging

from ..core.errors import NothingToRedoError, NothingToUndoError
from ..core.ports import TaskRepo
from .task_models import ActionKind, HistoryEntry

logger = logging.getLogger(__name__)


class UndoRedoEngine:
    """
    Two LIFO stacks of history entries.

    Entries are shared with the HistoryLog (same objects); the engine only moves
    references between its stacks. Stacks live for the lifetime of the engine and
    are never rebuilt from disk.
    """

    def __init__(self) -> None:
        self._undo: list[HistoryEntry] = []
        self._redo: list[HistoryEntry] = []

    def push(self, entry: HistoryEntry) -> None:
        """Record a fresh mutation: a new edit invalidates the redo future."""
        self._undo.append(entry)
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def peek_undo(self) -> HistoryEntry | None:
        return self._undo[-1] if self._undo else None

    def peek_redo(self) -> HistoryEntry | None:
        return self._redo[-1] if self._redo else None

    def undo(self, target: TaskRepo) -> HistoryEntry:
        if not self._undo:
            raise NothingToUndoError()
        entry = self._undo.pop()
        try:
            self._apply_inverse(entry, target)
        except Exception:
            self._undo.append(entry)
            raise
        self._redo.append(entry)
        logger.debug("Undone id=%s action=%s", entry.id, entry.action.value)
        return entry

    def redo(self, target: TaskRepo) -> HistoryEntry:
        if not self._redo:
            raise NothingToRedoError()
        entry = self._redo.pop()
        try:
            self._apply_forward(entry, target)
        except Exception:
            self._redo.append(entry)
            raise
        self._undo.append(entry)
        logger.debug("Redone id=%s action=%s", entry.id, entry.action.value)
        return entry

    @staticmethod
    def _apply_inverse(entry: HistoryEntry, target: TaskRepo) -> None:
        if entry.action is ActionKind.CREATE:
            target.discard_task(entry.task.id)
        elif entry.action is ActionKind.REMOVE:
            target.restore_task(entry.task.copy())
        else:
            target.restore_task(entry.before.copy())

    @staticmethod
    def _apply_forward(entry: HistoryEntry, target: TaskRepo) -> None:
        if entry.action is ActionKind.CREATE:
            target.restore_task(entry.task.copy())
        elif entry.action is ActionKind.REMOVE:
            target.discard_task(entry.task.id)
        else:
            target.restore_task(entry.after.copy())
