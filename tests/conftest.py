# tests/conftest.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todo_list.db import client as db_client
from todo_list.main import app


@pytest.fixture()
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the task store at a fresh SQLite file for each test."""
    path = tmp_path / "tasks.db"
    monkeypatch.setattr(db_client, "DATABASE_PATH", path)
    db_client.init_db()
    return path


@pytest.fixture()
def api(db_path: Path) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def add(api: TestClient):
    """POST a task and return its id."""

    def _add(task_text: str, task_date: str, task_time: str) -> int:
        body = api.post(
            "/api/tasks",
            json={"task_text": task_text, "task_date": task_date, "task_time": task_time},
        ).json()
        assert body["success"] is True
        return body["id"]

    return _add
