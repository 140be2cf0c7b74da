# src/todo_vault/connectors/console_connector.py

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ..cli.bootstrap import close_session, open_session
from ..cli.commands import registry as command_registry
from ..core.errors import AuthError, PersistenceError
from ..core.state import AppState

logger = logging.getLogger(__name__)

_EXIT_WORDS = ("/exit", "/quit")


def _main_menu(console: Console) -> str:
    console.print("\n[bold cyan]=== todo-vault ===[/bold cyan]")
    console.print("1. Register")
    console.print("2. Sign In")
    console.print("3. Exit")
    return Prompt.ask("Choose an option", choices=["1", "2", "3"], console=console)


def _register(state: AppState, console: Console) -> None:
    console.print("\n[cyan]--- Registration ---[/cyan]")
    username = Prompt.ask("Enter username", console=console)
    email = Prompt.ask("Enter email", console=console)
    password = Prompt.ask("Enter password", password=True, console=console)
    confirm = Prompt.ask("Confirm password", password=True, console=console)
    try:
        state.users.register(username, email, password, confirm)
    except (AuthError, PersistenceError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        return
    console.print("[green]✅ Registration successful! You can now sign in.[/green]")


def _sign_in(state: AppState, console: Console) -> bool:
    """Returns False when the user asked to quit from inside the dashboard."""
    console.print("\n[cyan]--- Sign In ---[/cyan]")
    identifier = Prompt.ask("Enter username or email", console=console)
    password = Prompt.ask("Enter password", password=True, console=console)
    try:
        user = state.users.authenticate(identifier, password)
        open_session(state, user)
    except (AuthError, PersistenceError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        return True

    console.print("[green]✅ Sign in successful![/green]")
    try:
        return _run_dashboard(state, console)
    finally:
        close_session(state)


def _run_dashboard(state: AppState, console: Console) -> bool:
    logger.info("Dashboard started user=%s", state.user.username if state.user else "?")
    console.print(command_registry.handle(state, "/dashboard"))

    while state.signed_in:
        user_input = console.input("[yellow]>>> [/yellow]").strip()
        if not user_input:
            continue

        if user_input.lower() in _EXIT_WORDS:
            logger.info("Console exit command received.")
            return False

        if not user_input.startswith("/"):
            user_input = "/" + user_input

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "[red]Internal error while handling a command.[/red]"

        if reply is not None:
            console.print(reply)

    return True


def run_console_loop(state: AppState, console: Console | None = None) -> None:
    console = console or Console()
    logger.info("Console connector started.")
    console.print("🚀 [bold]todo-vault[/bold]: your tasks, with undo.")

    while True:
        try:
            choice = _main_menu(console)
            if choice == "1":
                _register(state, console)
            elif choice == "2":
                if not _sign_in(state, console):
                    break
            else:
                break
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            console.print()
            break

    console.print("\nGoodbye!")
    logger.info("Console connector finished.")
