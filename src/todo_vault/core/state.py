# src/todo_vault/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskStore
from ..users.user_store import User, UserStore
from .ports import Clock, IdGenerator
from .runtime import RandomIdGenerator, SystemClock


@dataclass
class AppState:
    """
    Everything a connector needs, wired once by bootstrap.

    `user` / `task_store` are set for the duration of a signed-in session and
    cleared on logout.
    """

    settings: Any
    users: UserStore
    clock: Clock = field(default_factory=SystemClock)
    ids: IdGenerator = field(default_factory=RandomIdGenerator)

    user: User | None = None
    task_store: TaskStore | None = None

    @property
    def signed_in(self) -> bool:
        return self.user is not None and self.task_store is not None
