# src/todo_vault/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import RenderableType
from rich.markup import escape

from ..core.errors import AuthError, TodoVaultError, ValidationError
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from . import render
from .bootstrap import close_session

CommandHandler = Callable[[AppState, list[str]], RenderableType]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Command:
    handler: CommandHandler
    help_text: str
    needs_session: bool


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._commands: dict[str, _Command] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        needs_session: bool = True,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        cmd = _Command(handler=handler, help_text=help_text, needs_session=needs_session)
        self._commands[key] = cmd
        self._help[key] = help_text
        for alias in aliases:
            self._commands[alias.lower()] = cmd

    def handle(self, state: AppState, line: str) -> RenderableType | None:
        """
        Handle a string like "/command args".
        Returns a renderable reply or None if not a command.

        Domain errors are turned into a red message; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        cmd = self._commands.get(name)
        if not cmd:
            return f"Unknown command: /{escape(name)}. Use /help to list available commands."

        if cmd.needs_session and not state.signed_in:
            return "[red]❌ Please sign in first.[/red]"

        try:
            return cmd.handler(state, args)
        except TodoVaultError as e:
            logger.debug("Command /%s failed: %s", name, e)
            return f"[red]❌ {escape(str(e))}[/red]"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {escape(help_text)}")
        lines.append("  /exit - Quit the application.")
        return "\n".join(lines)


registry = CommandRegistry()


def _store(state: AppState) -> TaskStore:
    if state.task_store is None:
        raise AuthError("Please sign in first.")
    return state.task_store


def _parse_position(args: list[str], usage: str) -> int:
    if not args:
        raise ValidationError(f"Usage: {usage}")
    try:
        return int(args[0])
    except ValueError:
        raise ValidationError(f"Not a task number: {args[0]!r}. Usage: {usage}") from None


def cmd_help(state: AppState, args: list[str]) -> RenderableType:
    return registry.build_help()


def cmd_dashboard(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    return render.dashboard(store.username, store.get_all_tasks())


def cmd_list(state: AppState, args: list[str]) -> RenderableType:
    """
    /list          -> all tasks
    /list pending  -> pending only
    /list done     -> completed only
    """
    store = _store(state)
    all_tasks = store.get_all_tasks()
    positions = {t.id: i for i, t in enumerate(all_tasks, start=1)}

    which = args[0].lower() if args else "all"
    if which in ("all", "a"):
        tasks, title = all_tasks, f"📝 All tasks ({len(all_tasks)})"
    elif which in ("pending", "p", "todo"):
        tasks = store.get_pending_tasks()
        title = f"📌 Pending tasks ({len(tasks)})"
    elif which in ("done", "d", "completed"):
        tasks = store.get_completed_tasks()
        title = f"✅ Completed tasks ({len(tasks)})"
    else:
        return "Usage: /list [all|pending|done]"

    if not tasks:
        return f"[magenta]{escape(title)}: nothing here.[/magenta]"
    return render.tasks_table(tasks, positions=positions, title=title)


def cmd_add(state: AppState, args: list[str]) -> RenderableType:
    """/add <title> [-- description]"""
    raw = " ".join(args)
    title, sep, description = raw.partition(" -- ")
    if not sep and raw.endswith(" --"):
        title = raw[: -len(" --")]
    task = _store(state).create_task(title, description)
    return (
        f'[green]✅ Task "{escape(task.title)}" created.[/green]\n'
        f"[blue]📅 Created at: {render.ts_local(task.created_at)}[/blue]\n"
        "[red]📌 Status: PENDING[/red]"
    )


def cmd_done(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    task = store.get_task_by_position(_parse_position(args, "/done <n>"))
    updated = store.complete_task(task.id)
    if updated.completed:
        return (
            f'[green]✅ Task "{escape(updated.title)}" completed! 🎉[/green]\n'
            f"[green]📅 Completed at: {render.ts_local(updated.completed_at)}[/green]"
        )
    return f'[yellow]↩️ Task "{escape(updated.title)}" is pending again.[/yellow]'


def cmd_remove(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    task = store.get_task_by_position(_parse_position(args, "/rm <n>"))
    removed = store.remove_task(task.id)
    return f'[green]🗑️ Task "{escape(removed.title)}" removed.[/green] [bright_black](/undo to restore)[/bright_black]'


def cmd_show(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    position = _parse_position(args, "/show <n>")
    task = store.get_task_by_position(position)
    return render.task_detail(task, position, store.count_tasks())


def cmd_undo(state: AppState, args: list[str]) -> RenderableType:
    entry = _store(state).undo()
    return render.entry_notice("Undone", "↩️", entry)


def cmd_redo(state: AppState, args: list[str]) -> RenderableType:
    entry = _store(state).redo()
    return render.entry_notice("Redone", "↪️", entry)


def cmd_history(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    limit = int(getattr(state.settings, "history_limit", 10))
    if args:
        limit = _parse_position(args, "/history [n]")
        if limit < 1:
            raise ValidationError("Usage: /history [n] (n must be 1 or more)")
    entries = store.get_history(limit)
    return render.history_table(entries, total=store.history.count())


def cmd_whoami(state: AppState, args: list[str]) -> RenderableType:
    store = _store(state)
    user = state.user
    if user is None:
        raise AuthError("Please sign in first.")
    undo_hint = "yes" if store.can_undo() else "no"
    redo_hint = "yes" if store.can_redo() else "no"
    return (
        f"👤 User: {escape(user.username)}\n"
        f"📧 Email: {escape(user.email)}\n"
        f"📅 Last login: {render.ts_local(user.last_login)}\n"
        f"🔧 Completion policy: {store.policy.value}\n"
        f"↩️ Undo available: {undo_hint}   ↪️ Redo available: {redo_hint}"
    )


def cmd_logout(state: AppState, args: list[str]) -> RenderableType:
    name = state.user.username if state.user else "?"
    close_session(state)
    return f"[cyan]👋 Logged out {escape(name)}. Returning to main menu.[/cyan]"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"], needs_session=False)
registry.register("dashboard", cmd_dashboard, help_text="Show the dashboard.", aliases=["refresh", "d"])
registry.register("list", cmd_list, help_text="List tasks: /list [all|pending|done].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Create a task: /add <title> [-- description].", aliases=["new"])
registry.register("done", cmd_done, help_text="Complete task number n: /done <n>.", aliases=["complete"])
registry.register("rm", cmd_remove, help_text="Remove task number n: /rm <n>.", aliases=["remove", "del"])
registry.register("show", cmd_show, help_text="Show details of task number n: /show <n>.", aliases=["search"])
registry.register("undo", cmd_undo, help_text="Undo the last action.", aliases=["u"])
registry.register("redo", cmd_redo, help_text="Redo the last undone action.", aliases=["r"])
registry.register("history", cmd_history, help_text="Recent actions, newest first: /history [n].")
registry.register("whoami", cmd_whoami, help_text="Show account and session info.")
registry.register("logout", cmd_logout, help_text="Sign out and return to the main menu.")
