"""UI state of the task board: cached list, sort selection and edit surface."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import httpx
from pydantic import ValidationError

from ..models import (
    Envelope,
    SortKey,
    TaskPatch,
    TaskResponse,
    TaskStatus,
    is_overdue,
    validation_message,
)
from .api import TaskApiClient

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please try again."


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A transient message for the user."""

    message: str
    level: NoticeLevel = NoticeLevel.INFO


def validate_fields(task_text: str, task_date: str, task_time: str) -> str | None:
    """Return the warning to show for the first missing field, or None."""
    if not task_text.strip():
        return "Please enter a task description"
    if not task_date:
        return "Please select a date"
    if not task_time:
        return "Please select a time"
    return None


class TaskBoard:
    """
    Mirrors the server's task list and runs the user flows against the API.

    The board never trusts its own cache after a change: every successful
    mutation is followed by a full re-fetch with the current sort key.
    List responses that arrive after a newer fetch was issued are dropped.
    """

    def __init__(
        self,
        api: TaskApiClient,
        *,
        notify: Callable[[Notification], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.api = api
        self.tasks: list[TaskResponse] = []
        self.sort = SortKey.DATE_ASC
        self.editing: TaskResponse | None = None
        self._notify_cb = notify
        self._clock = clock
        self._fetch_token = 0

    def _notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        if self._notify_cb is not None:
            self._notify_cb(Notification(message, level))

    # ---- reads ----

    async def load(self) -> bool:
        """Re-fetch the whole list in the current order."""
        self._fetch_token += 1
        token = self._fetch_token
        try:
            envelope = await self.api.list_tasks(self.sort)
        except (httpx.HTTPError, ValueError):
            logger.warning("Loading tasks failed", exc_info=True)
            if token == self._fetch_token:
                self._notify(NETWORK_ERROR, NoticeLevel.ERROR)
            return False

        if token != self._fetch_token:
            logger.debug("Dropping stale task list token=%s latest=%s", token, self._fetch_token)
            return False

        if not envelope.success or not isinstance(envelope.data, list):
            self._notify("Error loading tasks", NoticeLevel.ERROR)
            return False

        self.tasks = envelope.data
        return True

    async def set_sort(self, sort: SortKey) -> bool:
        self.sort = sort
        return await self.load()

    def find(self, task_id: int) -> TaskResponse | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def is_overdue(self, task: TaskResponse) -> bool:
        return is_overdue(task, self._clock())

    def stats(self) -> dict[str, int]:
        counts = {status.value: 0 for status in TaskStatus}
        for task in self.tasks:
            counts[task.status.value] += 1
        return counts

    # ---- mutations ----

    async def _send(self, call: Awaitable[Envelope], failure: str) -> bool:
        try:
            envelope = await call
        except (httpx.HTTPError, ValueError):
            logger.warning("Task request failed", exc_info=True)
            self._notify(NETWORK_ERROR, NoticeLevel.ERROR)
            return False
        if not envelope.success:
            self._notify(envelope.message or failure, NoticeLevel.ERROR)
            return False
        return True

    async def add(self, task_text: str, task_date: str, task_time: str) -> bool:
        """Create a task; True tells the caller to clear its input row."""
        warning = validate_fields(task_text, task_date, task_time)
        if warning:
            self._notify(warning, NoticeLevel.WARNING)
            return False

        call = self.api.create_task(task_text.strip(), task_date, task_time)
        if not await self._send(call, "Failed to add task"):
            return False
        self._notify("Task added successfully", NoticeLevel.SUCCESS)
        await self.load()
        return True

    async def toggle(self, task: TaskResponse) -> bool:
        new_status = task.status.toggled()
        call = self.api.update_task(task.id, TaskPatch(status=new_status))
        if not await self._send(call, "Failed to update task"):
            return False
        self._notify(f"Task marked as {new_status.value}", NoticeLevel.SUCCESS)
        await self.load()
        return True

    def open_edit(self, task: TaskResponse) -> TaskResponse:
        self.editing = task
        return task

    def close_edit(self) -> None:
        self.editing = None

    async def save_edit(self, task_text: str, task_date: str, task_time: str) -> bool:
        """Send the edited fields of the task opened with open_edit."""
        if self.editing is None:
            self._notify("No task is being edited", NoticeLevel.WARNING)
            return False

        warning = validate_fields(task_text, task_date, task_time)
        if warning:
            self._notify(warning, NoticeLevel.WARNING)
            return False

        try:
            patch = TaskPatch(task_text=task_text, task_date=task_date, task_time=task_time)
        except ValidationError as exc:
            self._notify(validation_message(exc), NoticeLevel.WARNING)
            return False
        if not await self._send(self.api.update_task(self.editing.id, patch), "Failed to update task"):
            return False
        self._notify("Task updated successfully", NoticeLevel.SUCCESS)
        self.close_edit()
        await self.load()
        return True

    async def delete(self, task: TaskResponse, confirm: Callable[[TaskResponse], bool]) -> bool:
        """Delete after the user confirmed; declining is a no-op."""
        if not confirm(task):
            return False
        if not await self._send(self.api.delete_task(task.id), "Failed to delete task"):
            return False
        self._notify("Task deleted successfully", NoticeLevel.SUCCESS)
        await self.load()
        return True
