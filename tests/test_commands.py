# tests/test_commands.py

from __future__ import annotations

import io

import pytest
from rich.console import Console

from todo_vault.cli.commands import CommandRegistry, cmd_dashboard, cmd_list, cmd_whoami, registry
from todo_vault.core.errors import AuthError, ValidationError
from todo_vault.core.state import AppState


def _text(renderable) -> str:
    console = Console(file=io.StringIO(), width=160, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("a", handler, "a", aliases=["alpha"], needs_session=False)

    assert reg.handle(state, "/a x y") == "a:x,y"
    assert reg.handle(state, "/ALPHA") == "a:"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_domain_errors_become_messages(state: AppState) -> None:
    reg = CommandRegistry()

    def failing(state, args):
        raise ValidationError("Task title cannot be empty.")

    reg.register("fail", failing, "fails", needs_session=False)
    assert "Task title cannot be empty." in _text(reg.handle(state, "/fail"))


def test_session_commands_require_sign_in(state: AppState) -> None:
    assert "sign in" in _text(registry.handle(state, "/add milk"))
    assert "Available commands" in _text(registry.handle(state, "/help"))


def test_add_done_undo_flow(signed_in_state: AppState) -> None:
    state = signed_in_state
    store = state.task_store
    assert store is not None

    out = _text(registry.handle(state, "/add Buy milk -- semi-skimmed"))
    assert 'Task "Buy milk" created' in out
    registry.handle(state, "/add Pay bills")

    task = store.get_task_by_position(1)
    assert task.title == "Buy milk"
    assert task.description == "semi-skimmed"

    assert "completed" in _text(registry.handle(state, "/done 1"))
    assert "already completed" in _text(registry.handle(state, "/done 1"))

    pending = _text(registry.handle(state, "/list pending"))
    assert "Pay bills" in pending and "Buy milk" not in pending

    assert 'Undone: Completed task: "Buy milk"' in _text(registry.handle(state, "/undo"))
    assert [t.title for t in store.get_pending_tasks()] == ["Buy milk", "Pay bills"]

    assert "Redone" in _text(registry.handle(state, "/redo"))
    assert [t.title for t in store.get_completed_tasks()] == ["Buy milk"]


def test_position_arguments_are_validated(signed_in_state: AppState) -> None:
    state = signed_in_state
    registry.handle(state, "/add only task")

    assert "Usage: /done <n>" in _text(registry.handle(state, "/done"))
    assert "Not a task number" in _text(registry.handle(state, "/rm one"))
    assert "Task number 5 not found. You have 1 tasks." in _text(registry.handle(state, "/show 5"))
    assert "Nothing to redo" in _text(registry.handle(state, "/redo"))


def test_remove_show_and_history(signed_in_state: AppState) -> None:
    state = signed_in_state
    registry.handle(state, "/add first")
    registry.handle(state, "/add second")

    detail = _text(registry.handle(state, "/show 2"))
    assert "#2 of 2" in detail and "second" in detail

    assert "removed" in _text(registry.handle(state, "/rm 1"))
    assert [t.title for t in state.task_store.get_all_tasks()] == ["second"]

    history = _text(registry.handle(state, "/history 2"))
    assert history.index('Removed task: "first"') < history.index('Created task: "second"')


def test_markup_in_titles_is_escaped(signed_in_state: AppState) -> None:
    state = signed_in_state
    out = _text(registry.handle(state, "/add [bold]literal[/bold]"))
    assert "[bold]literal[/bold]" in out
    assert "[bold]literal[/bold]" in _text(registry.handle(state, "/dashboard"))


def test_logout_closes_session(signed_in_state: AppState) -> None:
    state = signed_in_state
    out = _text(registry.handle(state, "/logout"))
    assert "Logged out alice" in out
    assert not state.signed_in
    assert state.task_store is None


def test_history_count_must_be_positive(signed_in_state: AppState) -> None:
    state = signed_in_state
    registry.handle(state, "/add first")

    for arg in ("0", "-3"):
        out = _text(registry.handle(state, f"/history {arg}"))
        assert "n must be 1 or more" in out
        assert "No actions performed yet" not in out
    assert 'Created task: "first"' in _text(registry.handle(state, "/history 1"))


def test_handlers_without_session_raise_auth_error(signed_in_state: AppState) -> None:
    state = signed_in_state
    state.task_store = None
    for handler in (cmd_dashboard, cmd_whoami, cmd_list):
        with pytest.raises(AuthError, match="Please sign in first."):
            handler(state, [])
    assert "Please sign in first." in _text(registry.handle(state, "/dashboard"))
