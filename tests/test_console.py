# tests/test_console.py

import asyncio
from datetime import datetime

from rich.console import Console

from todo_list.client import console as console_ui
from todo_list.client.board import TaskBoard
from todo_list.models import TaskResponse, TaskStatus


class NoCallsApi:
    async def list_tasks(self, sort):
        raise AssertionError("not expected")


def _board() -> TaskBoard:
    board = TaskBoard(NoCallsApi(), clock=lambda: datetime(2024, 6, 1, 12, 0))
    board.tasks = [
        TaskResponse(
            id=1,
            task_text="Buy milk",
            task_date="2024-06-01",
            task_time="09:00",
            status=TaskStatus.PENDING,
            formatted_date="Jun 01, 2024",
            formatted_time="9:00 AM",
        ),
        TaskResponse(
            id=2,
            task_text="Pay rent",
            task_date="2024-06-05",
            task_time="10:00",
            status=TaskStatus.COMPLETED,
        ),
    ]
    return board


def _render(renderable) -> str:
    out = Console(width=120, record=True)
    out.print(renderable)
    return out.export_text()


def test_default_date_time():
    assert console_ui.default_date_time(datetime(2024, 6, 1, 23, 20)) == ("2024-06-01", "00:20")


def test_render_board_marks_overdue_and_counts():
    text = _render(console_ui.render_board(_board()))
    assert "Buy milk" in text
    assert "Jun 01, 2024" in text
    assert "Pending (Overdue)" in text
    assert "2024-06-05" in text
    assert "1 pending · 1 completed" in text


def test_unknown_commands_keep_the_loop_running(monkeypatch):
    shown = []
    monkeypatch.setattr(console_ui, "show_notification", shown.append)
    board = _board()

    assert asyncio.run(console_ui.handle_command(board, "frobnicate")) is True
    assert asyncio.run(console_ui.handle_command(board, "sort sideways")) is True
    assert asyncio.run(console_ui.handle_command(board, "done 42")) is True
    assert asyncio.run(console_ui.handle_command(board, "quit")) is False
    assert [n.message for n in shown] == [
        "Unknown command 'frobnicate'",
        "Unknown sort key 'sideways'",
        "No task with id '42'",
    ]
