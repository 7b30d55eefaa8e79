"""Task management agent using Claude Agent SDK."""

import asyncio
import sys
from io import StringIO
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    HookContext,
    HookInput,
    HookJSONOutput,
    HookMatcher,
    ResultMessage,
    SystemMessage,
    TextBlock,
    ToolUseBlock,
    create_sdk_mcp_server,
    tool,
)
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from ...config import get_settings
from ...db import create_task, get_all_tasks, get_task_by_id, init_db, update_task
from ...logging_setup import setup_logging
from ...models import (
    SortKey,
    TaskCreate,
    TaskPatch,
    TaskStatus,
    format_task_date,
    format_task_time,
    validation_message,
)

console = Console()

STATUS_LABELS = {"pending": "Pending", "completed": "Completed"}
STATUS_ICONS = {"pending": "⭕", "completed": "✅"}

SYSTEM_PROMPT = """\
You are a to-do list assistant.
Interpret the user's message and use the tools to work with their tasks.
Answer briefly.

Available tools:
- add_task: add a task (task_text, task_date as YYYY-MM-DD, task_time as HH:MM; all required)
- list_tasks: list tasks (sort: date_asc, date_desc or status)
- complete_task: mark a task completed (by id or part of its text)

Decline anything that is not about managing tasks."""


def _text(message: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": message}]}


# =============================================================================
# MCP Tools
# =============================================================================


@tool(
    "add_task",
    "Add a new task. task_date is YYYY-MM-DD, task_time is HH:MM.",
    {"task_text": str, "task_date": str, "task_time": str},
)
async def add_task_tool(args: dict[str, Any]) -> dict[str, Any]:
    try:
        task_data = TaskCreate.model_validate(args)
    except ValidationError as exc:
        return _text(f"Error: {validation_message(exc)}")

    task_id = create_task(task_data.task_text, task_data.task_date, task_data.task_time)
    return _text(
        f"Added task #{task_id}: {task_data.task_text} "
        f"({format_task_date(task_data.task_date)} {format_task_time(task_data.task_time)})"
    )


@tool(
    "list_tasks",
    "List tasks. sort is one of date_asc, date_desc, status; date_asc when omitted.",
    {"sort": str},
)
async def list_tasks_tool(args: dict[str, Any]) -> dict[str, Any]:
    sort = SortKey.parse(args.get("sort"))
    tasks = get_all_tasks(sort)
    if not tasks:
        return _text("There are no tasks")

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("ID", style="dim", width=6)
    table.add_column("Task", style="bold", min_width=20)
    table.add_column("Due", width=22)
    table.add_column("Status", justify="center", width=14)

    for task in tasks:
        icon = STATUS_ICONS.get(task["status"], "")
        label = STATUS_LABELS.get(task["status"], task["status"])
        due = f"{format_task_date(task['task_date'])} {format_task_time(task['task_time'])}"
        table.add_row(str(task["id"]), task["task_text"], due, f"{icon} {label}")

    buf = StringIO()
    Console(file=buf, width=80, legacy_windows=False).print(table)
    return _text(buf.getvalue())


@tool(
    "complete_task",
    "Mark a task completed. Give its id or part of its text.",
    {"query": str},
)
async def complete_task_tool(args: dict[str, Any]) -> dict[str, Any]:
    query = str(args.get("query", "")).strip()
    if not query:
        return _text("Error: tell me which task")

    task = get_task_by_id(int(query)) if query.isdigit() else None
    if not task:
        pending = [t for t in get_all_tasks() if t["status"] == TaskStatus.PENDING.value]
        matches = [t for t in pending if query.lower() in t["task_text"].lower()]
        if len(matches) == 0:
            return _text(f"No pending task matches '{query}'")
        if len(matches) > 1:
            names = "\n".join(f"- {m['task_text']} (ID: {m['id']})" for m in matches)
            return _text(f"Several tasks match, please be more specific:\n{names}")
        task = matches[0]

    update_task(task["id"], TaskPatch(status=TaskStatus.COMPLETED))
    return _text(f"Completed: {task['task_text']}")


# =============================================================================
# Pre-tool Hook
# =============================================================================

ALLOWED_TOOLS = {
    "mcp__task_manager__add_task",
    "mcp__task_manager__list_tasks",
    "mcp__task_manager__complete_task",
}


async def restrict_tools(
    input_data: HookInput,
    tool_use_id: str | None,
    context: HookContext,
) -> HookJSONOutput:
    tool_name = input_data.get("tool_name", "")
    if tool_name in ALLOWED_TOOLS:
        return {}
    return {
        "hookSpecificOutput": {
            "hookEventName": "PreToolUse",
            "permissionDecision": "deny",
            "permissionDecisionReason": f"{tool_name} is not allowed. Only task tools may be used.",
        }
    }


# =============================================================================
# Display
# =============================================================================


def display_message(msg: Any) -> None:
    if isinstance(msg, AssistantMessage):
        for block in msg.content:
            if isinstance(block, TextBlock):
                console.print(
                    Panel(
                        Text(block.text),
                        title="Claude",
                        title_align="left",
                        border_style="blue",
                        padding=(0, 1),
                    )
                )
            elif isinstance(block, ToolUseBlock):
                input_str = ", ".join(f"{k}={v}" for k, v in block.input.items())
                console.print(
                    Panel(
                        f"[cyan]{block.name}[/cyan] {input_str}",
                        title="Tool",
                        title_align="left",
                        border_style="green",
                        padding=(0, 1),
                    )
                )
    elif isinstance(msg, ResultMessage) and msg.total_cost_usd:
        console.print(f"[dim]cost: ${msg.total_cost_usd:.6f}[/dim]")


# =============================================================================
# Main
# =============================================================================


async def interactive_mode() -> None:
    init_db()

    task_server = create_sdk_mcp_server(
        name="task_manager",
        version="1.0.0",
        tools=[add_task_tool, list_tasks_tool, complete_task_tool],
    )

    options = ClaudeAgentOptions(
        system_prompt=SYSTEM_PROMPT,
        mcp_servers={"task_manager": task_server},
        allowed_tools=list(ALLOWED_TOOLS),
        hooks={"PreToolUse": [HookMatcher(hooks=[restrict_tools])]},
    )

    console.print(
        Panel(
            "Task assistant\nManage your tasks in plain language.\n[dim]quit to leave[/dim]",
            border_style="cyan",
            padding=(0, 2),
        )
    )

    while True:
        console.print()
        user_input = Prompt.ask("[bold cyan]you[/bold cyan]").strip()

        if user_input.lower() in ("quit", "exit", "q"):
            console.print("[green]Bye.[/green]")
            break
        if not user_input:
            continue

        async with ClaudeSDKClient(options=options) as client:
            await client.query(user_input)
            with console.status("[green]Thinking...", spinner="dots") as status:
                async for message in client.receive_response():
                    status.stop()
                    display_message(message)
                    if isinstance(message, (AssistantMessage, SystemMessage)):
                        status.start()


async def main() -> None:
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level="WARNING")
    try:
        await interactive_mode()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
    except Exception as e:
        Console(stderr=True).print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
