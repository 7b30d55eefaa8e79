"""Models package."""

from .task import (
    PATCH_FIELDS,
    REQUIRED_CREATE_FIELDS,
    Envelope,
    SortKey,
    TaskCreate,
    TaskPatch,
    TaskResponse,
    TaskStatus,
    format_task_date,
    format_task_time,
    is_overdue,
    validation_message,
    with_display_fields,
)

__all__ = [
    "PATCH_FIELDS",
    "REQUIRED_CREATE_FIELDS",
    "TaskStatus",
    "SortKey",
    "TaskCreate",
    "TaskPatch",
    "TaskResponse",
    "Envelope",
    "format_task_date",
    "format_task_time",
    "is_overdue",
    "validation_message",
    "with_display_fields",
]
