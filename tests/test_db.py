# tests/test_db.py

import sqlite3

import pytest

from todo_list.db import client as db_client
from todo_list.db import (
    count_tasks,
    create_task,
    delete_task,
    get_all_tasks,
    get_task_by_id,
    update_task,
)
from todo_list.models import SortKey, TaskPatch, TaskStatus


@pytest.fixture()
def seeded(db_path):
    """Three tasks out of chronological order, one of them completed."""
    late = create_task("Late", "2024-06-03", "08:00")
    early = create_task("Early", "2024-06-01", "09:00")
    mid = create_task("Mid", "2024-06-01", "17:30")
    update_task(early, TaskPatch(status=TaskStatus.COMPLETED))
    return {"late": late, "early": early, "mid": mid}


def _texts(tasks):
    return [t["task_text"] for t in tasks]


def test_create_assigns_increasing_ids_and_pending_status(db_path):
    first = create_task("One", "2024-06-01", "09:00")
    second = create_task("Two", "2024-06-01", "10:00")
    assert second > first

    row = get_task_by_id(first)
    assert row == {
        "id": first,
        "task_text": "One",
        "task_date": "2024-06-01",
        "task_time": "09:00",
        "status": "pending",
    }


def test_ids_are_not_reused_after_delete(db_path):
    first = create_task("One", "2024-06-01", "09:00")
    delete_task(first)
    assert create_task("Two", "2024-06-01", "09:00") > first


def test_get_missing_task_returns_none(db_path):
    assert get_task_by_id(999) is None


def test_sort_orders(seeded):
    assert _texts(get_all_tasks(SortKey.DATE_ASC)) == ["Early", "Mid", "Late"]
    assert _texts(get_all_tasks(SortKey.DATE_DESC)) == ["Late", "Mid", "Early"]
    assert _texts(get_all_tasks(SortKey.STATUS)) == ["Mid", "Late", "Early"]


def test_date_desc_reverses_ties(db_path):
    for text in ("a", "b", "c"):
        create_task(text, "2024-06-01", "09:00")
    asc = [t["id"] for t in get_all_tasks(SortKey.DATE_ASC)]
    desc = [t["id"] for t in get_all_tasks(SortKey.DATE_DESC)]
    assert desc == list(reversed(asc))


def test_update_applies_only_present_fields(seeded):
    affected = update_task(seeded["late"], TaskPatch(task_text="Later"))
    assert affected == 1
    row = get_task_by_id(seeded["late"])
    assert row["task_text"] == "Later"
    assert row["task_date"] == "2024-06-03"
    assert row["task_time"] == "08:00"
    assert row["status"] == "pending"


def test_update_and_delete_report_missing_rows(db_path):
    assert update_task(42, TaskPatch(task_text="x")) == 0
    assert delete_task(42) == 0


def test_delete_removes_row(seeded):
    assert delete_task(seeded["mid"]) == 1
    assert get_task_by_id(seeded["mid"]) is None
    assert len(get_all_tasks()) == 2


def test_count_tasks(seeded):
    assert count_tasks() == {"pending": 2, "completed": 1}


def test_status_column_rejects_unknown_values(seeded):
    with pytest.raises(sqlite3.IntegrityError):
        with db_client.get_db() as conn:
            conn.execute("UPDATE tasks SET status = 'archived' WHERE id = ?", (seeded["mid"],))
    assert get_task_by_id(seeded["mid"])["status"] == "pending"
