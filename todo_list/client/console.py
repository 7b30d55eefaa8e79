"""Interactive console front-end for the task API."""

import asyncio
import sys
from datetime import datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from ..config import get_settings
from ..logging_setup import setup_logging
from ..models import SortKey, TaskResponse, TaskStatus
from .api import TaskApiClient
from .board import NoticeLevel, Notification, TaskBoard

console = Console()

NOTICE_STYLES = {
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.ERROR: "red",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.INFO: "cyan",
}
STATUS_LABELS = {TaskStatus.PENDING: "Pending", TaskStatus.COMPLETED: "Completed"}
STATUS_ICONS = {TaskStatus.PENDING: "⭕", TaskStatus.COMPLETED: "✅"}

HELP_TEXT = """\
list                  show tasks
sort <key>            date_asc | date_desc | status
add                   add a task
done <id>             toggle pending/completed
edit <id>             edit text, date and time
delete <id>           delete a task
quit                  leave"""


# =============================================================================
# Display
# =============================================================================


def show_notification(notice: Notification) -> None:
    style = NOTICE_STYLES[notice.level]
    console.print(Panel(Text(notice.message), border_style=style, padding=(0, 1)))


def render_board(board: TaskBoard) -> Table:
    counts = board.stats()
    table = Table(
        show_header=True,
        header_style="bold blue",
        title=f"sort: {board.sort.value}",
        caption=f"{counts['pending']} pending · {counts['completed']} completed",
    )
    table.add_column("ID", style="dim", width=6)
    table.add_column("Task", style="bold", min_width=20)
    table.add_column("Date", width=14)
    table.add_column("Time", width=9)
    table.add_column("Status", width=22)

    for task in board.tasks:
        label = f"{STATUS_ICONS[task.status]} {STATUS_LABELS[task.status]}"
        status_cell = Text(label)
        if board.is_overdue(task):
            status_cell = Text(f"{label} (Overdue)", style="red")
        table.add_row(
            str(task.id),
            task.task_text,
            task.formatted_date or task.task_date,
            task.formatted_time or task.task_time,
            status_cell,
        )
    return table


def show_board(board: TaskBoard) -> None:
    if not board.tasks:
        console.print("[dim]No tasks yet.[/dim]")
        return
    console.print(render_board(board))


# =============================================================================
# Input
# =============================================================================


def default_date_time(now: datetime) -> tuple[str, str]:
    """Today's date and the next full hour, as ISO strings."""
    next_hour = now + timedelta(hours=1)
    return now.date().isoformat(), next_hour.strftime("%H:%M")


def confirm_delete(task: TaskResponse) -> bool:
    return Confirm.ask(f"Delete [bold]{task.task_text}[/bold]?", default=False)


def lookup(board: TaskBoard, raw_id: str) -> TaskResponse | None:
    try:
        task = board.find(int(raw_id))
    except ValueError:
        task = None
    if task is None:
        show_notification(Notification(f"No task with id '{raw_id}'", NoticeLevel.WARNING))
    return task


async def handle_command(board: TaskBoard, line: str) -> bool:
    """Run one console command. Returns False when the user wants to leave."""
    command, _, arg = line.partition(" ")
    command = command.lower()
    arg = arg.strip()

    if command in ("quit", "exit", "q"):
        return False

    if command in ("list", "ls"):
        if await board.load():
            show_board(board)
    elif command == "sort":
        if arg not in {key.value for key in SortKey}:
            show_notification(Notification(f"Unknown sort key '{arg}'", NoticeLevel.WARNING))
        elif await board.set_sort(SortKey(arg)):
            show_board(board)
    elif command == "add":
        today, next_hour = default_date_time(datetime.now())
        text = Prompt.ask("Task")
        task_date = Prompt.ask("Date", default=today)
        task_time = Prompt.ask("Time", default=next_hour)
        if await board.add(text, task_date, task_time):
            show_board(board)
    elif command in ("done", "toggle"):
        task = lookup(board, arg)
        if task and await board.toggle(task):
            show_board(board)
    elif command == "edit":
        task = lookup(board, arg)
        if task:
            board.open_edit(task)
            text = Prompt.ask("Task", default=task.task_text)
            task_date = Prompt.ask("Date", default=task.task_date)
            task_time = Prompt.ask("Time", default=task.task_time)
            if await board.save_edit(text, task_date, task_time):
                show_board(board)
            else:
                board.close_edit()
    elif command in ("delete", "del", "rm"):
        task = lookup(board, arg)
        if task and await board.delete(task, confirm_delete):
            show_board(board)
    elif command == "help":
        console.print(HELP_TEXT)
    elif command:
        show_notification(Notification(f"Unknown command '{command}'", NoticeLevel.WARNING))
    return True


# =============================================================================
# Main
# =============================================================================


async def interactive_mode(api_url: str) -> None:
    async with TaskApiClient(api_url) as api:
        board = TaskBoard(api, notify=show_notification)
        console.print(
            Panel(
                f"Neon To-Do\n[dim]{api_url}[/dim]\n[dim]help for commands, quit to leave[/dim]",
                border_style="cyan",
                padding=(0, 2),
            )
        )
        if await board.load():
            show_board(board)

        while True:
            console.print()
            line = Prompt.ask("[bold cyan]todo[/bold cyan]").strip()
            if not await handle_command(board, line):
                console.print("[green]Bye.[/green]")
                break


async def main() -> None:
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level="WARNING")
    try:
        await interactive_mode(settings.api_url)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
