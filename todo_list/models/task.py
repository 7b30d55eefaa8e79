"""Pydantic models for the task API."""

import re
from datetime import date, datetime, time
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints, ValidationError


class TaskStatus(str, Enum):
    """Task status enumeration."""

    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "TaskStatus":
        if self is TaskStatus.PENDING:
            return TaskStatus.COMPLETED
        return TaskStatus.PENDING


class SortKey(str, Enum):
    """Orderings available for the task listing."""

    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"
    STATUS = "status"

    @classmethod
    def parse(cls, raw: str | None) -> "SortKey":
        """Map a query value to a sort key; unknown values mean date_asc."""
        try:
            return cls(raw)
        except ValueError:
            return cls.DATE_ASC


ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
ISO_TIME_RE = re.compile(r"[0-9]{2}:[0-9]{2}(:[0-9]{2})?")


def _check_iso_date(value: str) -> str:
    """Only YYYY-MM-DD; stored text must sort chronologically."""
    if not ISO_DATE_RE.fullmatch(value):
        raise ValueError("expected YYYY-MM-DD")
    date.fromisoformat(value)
    return value


def _check_iso_time(value: str) -> str:
    """Only HH:MM or HH:MM:SS, without offset or fraction."""
    if not ISO_TIME_RE.fullmatch(value):
        raise ValueError("expected HH:MM or HH:MM:SS")
    time.fromisoformat(value)
    return value


TaskText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
TaskDate = Annotated[str, AfterValidator(_check_iso_date)]
TaskTime = Annotated[str, AfterValidator(_check_iso_time)]

REQUIRED_CREATE_FIELDS = ("task_text", "task_date", "task_time")
PATCH_FIELDS = ("task_text", "task_date", "task_time", "status")


class TaskCreate(BaseModel):
    """Request model for creating a task."""

    model_config = ConfigDict(extra="ignore")

    task_text: TaskText
    task_date: TaskDate
    task_time: TaskTime


class TaskPatch(BaseModel):
    """
    Partial update of a task.

    Every field is optional. A field that is absent or null is left
    untouched by the store.
    """

    model_config = ConfigDict(extra="ignore")

    task_text: TaskText | None = None
    task_date: TaskDate | None = None
    task_time: TaskTime | None = None
    status: TaskStatus | None = None

    def fields_set(self) -> set[str]:
        return {name for name in PATCH_FIELDS if getattr(self, name) is not None}

    def is_empty(self) -> bool:
        return not self.fields_set()


class TaskResponse(BaseModel):
    """Response model for a task."""

    id: int
    task_text: str
    task_date: str
    task_time: str
    status: TaskStatus
    formatted_date: str | None = None
    formatted_time: str | None = None

    def due_at(self) -> datetime:
        """Naive local due instant built from the raw date and time."""
        return datetime.combine(
            date.fromisoformat(self.task_date), time.fromisoformat(self.task_time)
        )


class Envelope(BaseModel):
    """Uniform wrapper returned by every API call."""

    success: bool
    data: TaskResponse | list[TaskResponse] | None = None
    message: str | None = None
    id: int | None = None


def format_task_date(value: str) -> str:
    """'2024-06-01' -> 'Jun 01, 2024'."""
    return date.fromisoformat(value).strftime("%b %d, %Y")


def format_task_time(value: str) -> str:
    """'21:05' -> '9:05 PM'."""
    t = time.fromisoformat(value)
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{t.hour % 12 or 12}:{t.minute:02d} {suffix}"


def is_overdue(task: TaskResponse, now: datetime) -> bool:
    """Display-only flag: due instant already passed while still pending."""
    return task.status is TaskStatus.PENDING and task.due_at() < now


def with_display_fields(task: dict) -> TaskResponse:
    """Build the wire model of a stored row, adding the formatted date/time."""
    return TaskResponse(
        **task,
        formatted_date=format_task_date(task["task_date"]),
        formatted_time=format_task_time(task["task_time"]),
    )


def validation_message(exc: ValidationError) -> str:
    """Collapse a pydantic error into one line for the envelope."""
    err = exc.errors()[0]
    field_name = ".".join(str(p) for p in err.get("loc", ())) or "request"
    return f"Invalid {field_name}: {err.get('msg', 'invalid value')}"
