# src/todo_vault/core/ports.py

"""
Ports (interfaces) used by the core.

Stores depend on these Protocols instead of reading the wall clock or a random
source directly. Tests inject deterministic fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task


class Clock(Protocol):
    """Source of current time. Must return timezone-aware datetimes."""

    def now(self) -> datetime: ...


class IdGenerator(Protocol):
    """Collision-resistant identifiers, e.g. "task_1700000000000_1a2b3c4d"."""

    def new_id(self, prefix: str) -> str: ...


class TaskRepo(Protocol):
    """
    What the undo/redo engine needs from a task store.

    Both methods commit and persist, but never record history.
    """

    def restore_task(self, task: Task) -> None: ...
    def discard_task(self, task_id: str) -> None: ...
