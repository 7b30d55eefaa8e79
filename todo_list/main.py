"""FastAPI application entry point."""

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .db import count_tasks, get_all_tasks, init_db
from .models import Envelope, SortKey, is_overdue, with_display_fields
from .routers import tasks

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    yield


app = FastAPI(
    title="Neon To-Do",
    description="Dated and timed to-do list",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

templates = Jinja2Templates(directory=TEMPLATES_DIR)

app.include_router(tasks.router)


@app.exception_handler(sqlite3.Error)
async def store_error_handler(request: Request, exc: sqlite3.Error):
    """Log store failures and hide their detail from the caller."""
    logger.error("API Error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    body = Envelope(success=False, message="Server error occurred")
    return JSONResponse(body.model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def invalid_method_handler(request: Request, exc: StarletteHTTPException):
    """Unsupported verbs get an envelope instead of a 405."""
    if exc.status_code == 405:
        body = Envelope(success=False, message="Invalid request method")
        return JSONResponse(body.model_dump(exclude_none=True))
    return await http_exception_handler(request, exc)


@app.get("/", response_class=HTMLResponse)
def index(request: Request, sort: str | None = None):
    """Render the task board."""
    sort_key = SortKey.parse(sort)
    now = datetime.now()
    board = [
        {"task": task, "overdue": is_overdue(task, now)}
        for task in map(with_display_fields, get_all_tasks(sort_key))
    ]
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "board": board,
            "counts": count_tasks(),
            "sort": sort_key.value,
            "sort_keys": [key.value for key in SortKey],
        },
    )


def main():
    """Run the application with uvicorn."""
    import uvicorn

    from .logging_setup import setup_logging

    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    uvicorn.run(
        "todo_list.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
