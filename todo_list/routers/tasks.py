"""Task API router."""

import logging

from fastapi import APIRouter, Query, Request, Response
from pydantic import ValidationError

from ..db import (
    create_task,
    delete_task,
    get_all_tasks,
    get_task_by_id,
    update_task,
)
from ..models import (
    REQUIRED_CREATE_FIELDS,
    Envelope,
    SortKey,
    TaskCreate,
    TaskPatch,
    validation_message,
    with_display_fields,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# =============================================================================
# Helper Functions
# =============================================================================


def parse_task_id(raw: str | None) -> int:
    """Read the id query value; anything that is not an integer counts as 0."""
    if raw is None:
        return 0
    try:
        return int(raw.strip())
    except ValueError:
        return 0


async def read_json_object(request: Request) -> dict:
    """Request body as a dict; empty, malformed or non-object bodies give {}."""
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


# =============================================================================
# REST API Endpoints (JSON envelopes)
# =============================================================================


@router.get("", response_model=Envelope, response_model_exclude_none=True)
def read_tasks(
    raw_id: str | None = Query(None, alias="id"),
    sort: str | None = None,
):
    """Get one task by id, or all tasks in the requested order."""
    task_id = parse_task_id(raw_id)
    if task_id > 0:
        task = get_task_by_id(task_id)
        if not task:
            return Envelope(success=False, message="Task not found")
        return Envelope(success=True, data=with_display_fields(task))

    sort_key = SortKey.parse(sort)
    tasks = get_all_tasks(sort_key)
    return Envelope(success=True, data=[with_display_fields(task) for task in tasks])


@router.post("", response_model=Envelope, response_model_exclude_none=True)
async def create_task_endpoint(request: Request):
    """Create a new pending task."""
    data = await read_json_object(request)
    if any(data.get(name) is None for name in REQUIRED_CREATE_FIELDS):
        return Envelope(success=False, message="Missing required fields")

    try:
        task_data = TaskCreate.model_validate(data)
    except ValidationError as exc:
        return Envelope(success=False, message=validation_message(exc))

    task_id = create_task(task_data.task_text, task_data.task_date, task_data.task_time)
    logger.info("Created task id=%s", task_id)
    return Envelope(success=True, message="Task added successfully", id=task_id)


@router.put("", response_model=Envelope, response_model_exclude_none=True)
async def update_task_endpoint(
    request: Request,
    raw_id: str | None = Query(None, alias="id"),
):
    """Update any subset of a task's text, date, time and status."""
    task_id = parse_task_id(raw_id)
    if task_id <= 0:
        return Envelope(success=False, message="Task ID required")

    data = await read_json_object(request)
    try:
        patch = TaskPatch.model_validate(data)
    except ValidationError as exc:
        return Envelope(success=False, message=validation_message(exc))

    if patch.is_empty():
        return Envelope(success=False, message="No fields to update")

    update_task(task_id, patch)
    return Envelope(success=True, message="Task updated successfully")


@router.delete("", response_model=Envelope, response_model_exclude_none=True)
def delete_task_endpoint(raw_id: str | None = Query(None, alias="id")):
    """Delete a task. A missing row is not reported."""
    task_id = parse_task_id(raw_id)
    if task_id <= 0:
        return Envelope(success=False, message="Task ID required")

    delete_task(task_id)
    logger.info("Deleted task id=%s", task_id)
    return Envelope(success=True, message="Task deleted successfully")


@router.options("")
def preflight():
    """Answer bare OPTIONS requests; CORS preflights are handled by the middleware."""
    return Response(status_code=200)
