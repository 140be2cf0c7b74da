# src/todo_vault/cli/render.py

"""Rich renderables for the console dashboard (tables, task details, history)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from rich import box
from rich.console import Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..tasks.task_models import ActionKind, HistoryEntry, Task

COLORS = {
    "pending": "red",
    "done": "green",
    "header": "cyan",
    "muted": "bright_black",
    "info": "blue",
    "warning": "yellow",
}

ACTION_COLORS = {
    ActionKind.CREATE: "blue",
    ActionKind.COMPLETE: "green",
    ActionKind.UNCOMPLETE: "yellow",
    ActionKind.REMOVE: "red",
}


def ts_local(dt: datetime | None) -> str:
    if dt is None:
        return "-"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def time_to_complete(task: Task) -> str | None:
    """Coarse "N day(s)/hour(s)/minute(s)" between creation and completion."""
    if not task.completed or task.completed_at is None:
        return None
    minutes = max(0, int((task.completed_at - task.created_at).total_seconds() // 60))
    hours = minutes // 60
    days = hours // 24
    if days > 0:
        return f"{days} day(s)"
    if hours > 0:
        return f"{hours} hour(s)"
    return f"{minutes} minute(s)"


def status_text(task: Task) -> Text:
    if task.completed:
        return Text("✅ done", style=COLORS["done"])
    return Text("⏳ pending", style=COLORS["pending"])


def tasks_table(
    tasks: Iterable[Task],
    *,
    positions: dict[str, int],
    title: str,
) -> Table:
    """
    `positions` maps task id -> 1-based position in the full list, so filtered
    views still show the numbers that /done, /rm and /show accept.
    """
    table = Table(title=title, box=box.SIMPLE, title_justify="left", expand=False)
    table.add_column("#", justify="right", style="bold")
    table.add_column("Status")
    table.add_column("Title")
    table.add_column("Created", style=COLORS["muted"])
    table.add_column("Completed", style=COLORS["muted"])

    for task in tasks:
        style = COLORS["done"] if task.completed else COLORS["pending"]
        title_cell = Text(task.title, style=style)
        if task.description:
            title_cell.append(f"\n{task.description}", style=COLORS["muted"])
        table.add_row(
            str(positions.get(task.id, "?")),
            status_text(task),
            title_cell,
            ts_local(task.created_at),
            ts_local(task.completed_at) if task.completed else "",
        )
    return table


def dashboard(username: str, all_tasks: list[Task]) -> RenderableType:
    positions = {t.id: i for i, t in enumerate(all_tasks, start=1)}
    pending = [t for t in all_tasks if not t.completed]
    done = [t for t in all_tasks if t.completed]

    header = Text.assemble(
        ("🎯 Dashboard", "bold"),
        ("  user: ", COLORS["muted"]),
        (username, COLORS["info"]),
        ("  pending: ", COLORS["muted"]),
        (str(len(pending)), COLORS["pending"]),
        ("  completed: ", COLORS["muted"]),
        (str(len(done)), COLORS["done"]),
    )

    if not all_tasks:
        body: RenderableType = Text("No tasks yet. Create your first task with /add.", style="magenta")
    else:
        body = tasks_table(all_tasks, positions=positions, title="📝 Your tasks")

    return Panel(
        Group(header, body, Text("Type /help for commands.", style=COLORS["muted"])),
        border_style=COLORS["header"],
        expand=False,
    )


def task_detail(task: Task, position: int, total: int) -> RenderableType:
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    table.add_row("Position", f"#{position} of {total}")
    table.add_row("Title", Text(task.title, style="bold"))
    if task.description.strip():
        table.add_row("Description", task.description)
    table.add_row("Status", status_text(task))
    table.add_row("Task ID", Text(task.id, style=COLORS["warning"]))
    table.add_row("Created", ts_local(task.created_at))
    if task.completed:
        table.add_row("Completed", ts_local(task.completed_at))
        took = time_to_complete(task)
        if took:
            table.add_row("Time to complete", Text(took, style="magenta"))
    return Panel(table, title="🔍 Task", border_style=COLORS["header"], expand=False)


def history_table(entries: list[HistoryEntry], *, total: int) -> RenderableType:
    if not entries:
        return Text("No actions performed yet.", style=COLORS["warning"])

    table = Table(
        title=f"📜 Action history (showing {len(entries)} of {total})",
        box=box.SIMPLE,
        title_justify="left",
    )
    table.add_column("#", justify="right")
    table.add_column("Action")
    table.add_column("Details")
    table.add_column("When", style=COLORS["muted"])
    for i, entry in enumerate(entries, start=1):
        color = ACTION_COLORS.get(entry.action, "white")
        table.add_row(
            str(i),
            Text(entry.action.value, style=color),
            Text(entry.details, style=color),
            ts_local(entry.timestamp),
        )
    return table


def entry_notice(verb: str, icon: str, entry: HistoryEntry) -> str:
    return (
        f"[green]{icon} {verb}: {escape(entry.details)}[/green]\n"
        f"[blue]📅 Original action time: {ts_local(entry.timestamp)}[/blue]"
    )
