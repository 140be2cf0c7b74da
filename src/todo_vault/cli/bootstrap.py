# src/todo_vault/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (clock/ids/users),
- opens and closes per-user task sessions.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.runtime import RandomIdGenerator, SystemClock
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from ..users.user_store import User, UserStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.users_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    clock = SystemClock()
    ids = RandomIdGenerator()
    users = UserStore(
        settings.users_path,
        clock=clock,
        ids=ids,
        min_password_length=getattr(settings, "password_min_length", 6),
    )
    return AppState(settings=settings, users=users, clock=clock, ids=ids)


def open_session(state: AppState, user: User) -> TaskStore:
    """Build the signed-in user's TaskStore (fresh undo/redo stacks)."""
    settings = state.settings
    store = TaskStore(
        user.username,
        data_dir=settings.tasks_dir,
        clock=state.clock,
        ids=state.ids,
        policy=settings.completion_policy,
    )
    state.user = user
    state.task_store = store
    logger.info("Session opened username=%s", user.username)
    return store


def close_session(state: AppState) -> None:
    if state.user is not None:
        logger.info("Session closed username=%s", state.user.username)
    state.user = None
    state.task_store = None
