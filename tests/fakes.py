# tests/fakes.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from todo_vault.core.errors import PersistenceError
from todo_vault.tasks.task_models import Task


class FakeClock:
    """
    Deterministic clock for unit tests.

    Every call to now() returns the current instant and then advances by `step`,
    so creation order is always reflected in created_at.
    """

    def __init__(
        self,
        start: datetime | None = None,
        step: timedelta = timedelta(minutes=1),
    ) -> None:
        self.current = start or datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        self.step = step
        self.calls = 0

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        self.calls += 1
        return value


class SequentialIds:
    """Predictable ids: task_1, task_2, hist_1, ..."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}

    def new_id(self, prefix: str) -> str:
        n = self.counters.get(prefix, 0) + 1
        self.counters[prefix] = n
        return f"{prefix}_{n}"


class RecordingRepo:
    """
    Minimal TaskRepo used by engine-level tests.

    Keeps tasks in a dict and can be told to fail the next write.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, Task] = {}
        self.fail_next = False

    def _maybe_fail(self) -> None:
        if self.fail_next:
            self.fail_next = False
            raise PersistenceError("disk full")

    def restore_task(self, task: Task) -> None:
        self._maybe_fail()
        self.tasks[task.id] = task

    def discard_task(self, task_id: str) -> None:
        self._maybe_fail()
        del self.tasks[task_id]
