# src/todo_vault/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import re
from pathlib import Path

from ..core.errors import (
    AlreadyCompletedError,
    NotFoundError,
    OutOfRangeError,
    PersistenceError,
    ValidationError,
)
from ..core.jsonio import ensure_json_list, read_json_list, write_json_atomic
from ..core.ports import Clock, IdGenerator
from ..core.runtime import RandomIdGenerator, SystemClock
from .history_log import HistoryLog
from .task_models import ActionKind, CompletionPolicy, HistoryEntry, Task
from .undo import UndoRedoEngine

logger = logging.getLogger(__name__)


def _order_key(task: Task) -> tuple:
    return (task.created_at, task.seq)


_SLUG_RE = re.compile(r"[^a-z0-9_-]")


def user_slug(username: str) -> str:
    """Filesystem-safe, deterministic name fragment for a username."""
    slug = _SLUG_RE.sub("_", username.strip().lower())
    if not slug:
        raise ValidationError("username is required")
    return slug


def tasks_file_for(data_dir: Path, username: str) -> Path:
    return data_dir / f"tasks_{user_slug(username)}.json"


def history_file_for(data_dir: Path, username: str) -> Path:
    return data_dir / f"history_{user_slug(username)}.json"


class TaskStore:
    """
    One user's task collection.

    Persistence:
    - the full collection is rewritten on every mutation (JSON, pretty-printed)
    - mutations build a working copy; the in-memory collection is swapped only
      after the file write succeeded

    Every user mutation is appended to the HistoryLog and pushed onto the undo
    stack. undo()/redo() replay the recorded payloads through restore_task and
    discard_task, which persist but never record history.

    Not thread-safe; callers serialize access (one session per user).
    """

    def __init__(
        self,
        username: str,
        *,
        data_dir: str | Path,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        policy: CompletionPolicy = CompletionPolicy.ONE_WAY,
        history: HistoryLog | None = None,
        undo: UndoRedoEngine | None = None,
    ) -> None:
        self._username = username
        self._data_dir = Path(data_dir)
        self._clock = clock or SystemClock()
        self._ids = ids or RandomIdGenerator()
        self._policy = policy
        self._path = tasks_file_for(self._data_dir, username)

        ensure_json_list(self._path)
        self._tasks: dict[str, Task] = self._load()
        self._next_seq = max((t.seq for t in self._tasks.values()), default=0) + 1
        self._history = history or HistoryLog(
            history_file_for(self._data_dir, username), clock=self._clock, ids=self._ids
        )
        self._undo = undo or UndoRedoEngine()

        logger.info(
            "TaskStore ready user=%s file=%s total=%s policy=%s",
            username,
            self._path,
            len(self._tasks),
            policy.value,
        )

    @property
    def username(self) -> str:
        return self._username

    @property
    def policy(self) -> CompletionPolicy:
        return self._policy

    @property
    def path(self) -> Path:
        return self._path

    @property
    def history(self) -> HistoryLog:
        return self._history

    # ---- low-level helpers ----

    def _load(self) -> dict[str, Task]:
        tasks: dict[str, Task] = {}
        for raw in read_json_list(self._path):
            try:
                task = Task.from_dict(raw)
            except (KeyError, ValueError):
                logger.warning("Skipping malformed task record in %s: %r", self._path, raw)
                continue
            tasks[task.id] = task

        # Records written without a sequence get one in file order.
        last = max((t.seq for t in tasks.values()), default=0)
        for task in tasks.values():
            if task.seq <= 0:
                last += 1
                task.seq = last
        return tasks

    def _commit(self, working: dict[str, Task]) -> None:
        ordered = sorted(working.values(), key=_order_key)
        write_json_atomic(self._path, [t.to_dict() for t in ordered])
        self._tasks = working

    def _record(
        self,
        working: dict[str, Task],
        kind: ActionKind,
        details: str,
        payload: dict[str, Task],
    ) -> HistoryEntry:
        previous = self._tasks
        self._commit(working)
        try:
            entry = self._history.append(kind, details, payload)
        except PersistenceError:
            logger.error("History append failed; rolling back %s", self._path)
            with contextlib.suppress(PersistenceError):
                self._commit(previous)
            self._tasks = previous
            raise
        self._undo.push(entry)
        return entry

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(str(task_id))
        if task is None:
            raise NotFoundError(f"Task not found: {task_id}")
        return task

    # ---- mutations ----

    def create_task(self, title: str, description: str = "") -> Task:
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValidationError("Task title cannot be empty.")

        task = Task(
            id=self._ids.new_id("task"),
            title=clean_title,
            description=(description or "").strip(),
            completed=False,
            created_at=self._clock.now(),
            completed_at=None,
            seq=self._next_seq,
        )
        working = dict(self._tasks)
        working[task.id] = task
        self._record(working, ActionKind.CREATE, f'Created task: "{task.title}"', {"task": task})
        self._next_seq += 1
        logger.debug("Task created id=%s user=%s", task.id, self._username)
        return task.copy()

    def complete_task(self, task_id: str) -> Task:
        before = self._require(task_id)

        if before.completed:
            if self._policy is CompletionPolicy.ONE_WAY:
                raise AlreadyCompletedError(f'Task "{before.title}" is already completed.')
            after = before.copy()
            after.completed = False
            after.completed_at = None
            kind, verb = ActionKind.UNCOMPLETE, "Uncompleted"
        else:
            after = before.copy()
            after.completed = True
            after.completed_at = self._clock.now()
            kind, verb = ActionKind.COMPLETE, "Completed"

        working = dict(self._tasks)
        working[after.id] = after
        self._record(
            working, kind, f'{verb} task: "{after.title}"', {"before": before.copy(), "after": after}
        )
        logger.debug("Task %s id=%s user=%s", kind.value.lower(), after.id, self._username)
        return after.copy()

    def remove_task(self, task_id: str) -> Task:
        task = self._require(task_id)
        working = dict(self._tasks)
        del working[task.id]
        self._record(working, ActionKind.REMOVE, f'Removed task: "{task.title}"', {"task": task})
        logger.debug("Task removed id=%s user=%s", task.id, self._username)
        return task.copy()

    # ---- undo / redo ----

    def restore_task(self, task: Task) -> None:
        """Insert or overwrite `task` exactly as given (undo/redo only)."""
        working = dict(self._tasks)
        working[task.id] = task.copy()
        self._commit(working)

    def discard_task(self, task_id: str) -> None:
        """Drop a task by id (undo/redo only)."""
        self._require(task_id)
        working = dict(self._tasks)
        del working[str(task_id)]
        self._commit(working)

    def undo(self) -> HistoryEntry:
        return self._undo.undo(self)

    def redo(self) -> HistoryEntry:
        return self._undo.redo(self)

    def can_undo(self) -> bool:
        return self._undo.can_undo()

    def can_redo(self) -> bool:
        return self._undo.can_redo()

    # ---- queries ----

    def get_all_tasks(self) -> list[Task]:
        ordered = sorted(self._tasks.values(), key=_order_key)
        return [t.copy() for t in ordered]

    def get_pending_tasks(self) -> list[Task]:
        return [t for t in self.get_all_tasks() if not t.completed]

    def get_completed_tasks(self) -> list[Task]:
        return [t for t in self.get_all_tasks() if t.completed]

    def get_task_by_position(self, position: int) -> Task:
        """1-indexed position in get_all_tasks() order."""
        tasks = self.get_all_tasks()
        if position < 1 or position > len(tasks):
            raise OutOfRangeError(position, len(tasks))
        return tasks[position - 1]

    def get_task(self, task_id: str) -> Task | None:
        task = self._tasks.get(str(task_id))
        return task.copy() if task else None

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get_history(self, limit: int = 10) -> list[HistoryEntry]:
        return self._history.get_recent(limit)
