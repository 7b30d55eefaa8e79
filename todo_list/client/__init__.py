"""Task client package."""

from .api import TaskApiClient
from .board import NoticeLevel, Notification, TaskBoard, validate_fields

__all__ = [
    "TaskApiClient",
    "TaskBoard",
    "Notification",
    "NoticeLevel",
    "validate_fields",
]
