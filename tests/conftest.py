# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_vault.cli.bootstrap import open_session
from todo_vault.core.state import AppState
from todo_vault.tasks.task_models import CompletionPolicy
from todo_vault.tasks.task_store import TaskStore
from todo_vault.users.user_store import UserStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-vault-test",
        log_level="DEBUG",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        users_path=tmp_path / "users.json",
        tasks_dir=tmp_path / "users",
        # Behaviour
        completion_policy=CompletionPolicy.ONE_WAY,
        history_limit=10,
        password_min_length=6,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def store(tmp_path: Path, clock: FakeClock, ids: SequentialIds) -> TaskStore:
    return TaskStore("alice", data_dir=tmp_path, clock=clock, ids=ids)


@pytest.fixture()
def toggle_store(tmp_path: Path, clock: FakeClock, ids: SequentialIds) -> TaskStore:
    return TaskStore(
        "bob", data_dir=tmp_path, clock=clock, ids=ids, policy=CompletionPolicy.TOGGLE
    )


@pytest.fixture()
def users(settings: SimpleNamespace, clock: FakeClock, ids: SequentialIds) -> UserStore:
    # Low iteration count keeps hashing fast in tests.
    return UserStore(settings.users_path, clock=clock, ids=ids, hash_iterations=1_000)


@pytest.fixture()
def state(
    settings: SimpleNamespace, users: UserStore, clock: FakeClock, ids: SequentialIds
) -> AppState:
    """AppState wired with deterministic fakes; nobody is signed in."""
    return AppState(settings=settings, users=users, clock=clock, ids=ids)


@pytest.fixture()
def signed_in_state(state: AppState) -> AppState:
    user = state.users.register("alice", "alice@example.com", "secret123")
    open_session(state, user)
    return state
