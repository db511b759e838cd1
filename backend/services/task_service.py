from __future__ import annotations

import json
import re
from datetime import date

from sqlalchemy.orm import Session

from db.models import Task
from db.queries import list_tasks_for_owner_in_range
from services.errors import Conflict, InvalidState, NotFound
from utils.datetime_utils import day_window

HHMM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


class TimeSlotConflict(Conflict):
    """Raised when a task's time slot overlaps another task on the same day."""

    def __init__(self, conflicting: list[Task]):
        super().__init__("Time slot conflicts with existing task")
        self.conflicting = conflicting


def normalize_hhmm(value: str, field: str) -> str:
    match = HHMM_RE.match((value or "").strip())
    if not match:
        raise InvalidState(f"Invalid {field} format. Use HH:MM")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def find_conflicting_tasks(
    db: Session,
    user_id: int,
    day: date,
    start_time: str,
    end_time: str,
    exclude_task_id: int | None = None,
) -> list[Task]:
    start, end = day_window(day)
    return [
        t
        for t in list_tasks_for_owner_in_range(db, user_id, start, end)
        if t.id != exclude_task_id and t.start_time < end_time and t.end_time > start_time
    ]


def _check_slot(db: Session, user_id: int, day: date, start_time: str, end_time: str, exclude_task_id: int | None = None) -> None:
    if start_time >= end_time:
        raise InvalidState("start_time must be before end_time")
    conflicting = find_conflicting_tasks(db, user_id, day, start_time, end_time, exclude_task_id)
    if conflicting:
        raise TimeSlotConflict(conflicting)


def list_tasks_for_day(db: Session, user_id: int, day: date) -> list[Task]:
    start, end = day_window(day)
    return list_tasks_for_owner_in_range(db, user_id, start, end)


def get_task(db: Session, user_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


def create_task(
    db: Session,
    user_id: int,
    *,
    title: str,
    category: str,
    start_time: str,
    end_time: str,
    day: date,
    description: str | None = None,
    attachments: list[str] | None = None,
) -> Task:
    start_time = normalize_hhmm(start_time, "start_time")
    end_time = normalize_hhmm(end_time, "end_time")
    _check_slot(db, user_id, day, start_time, end_time)

    task = Task(
        user_id=user_id,
        title=title.strip(),
        description=(description or "").strip(),
        category=category.strip(),
        start_time=start_time,
        end_time=end_time,
        day=day,
        completed=False,
        attachments=json.dumps(attachments or []),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, user_id: int, task_id: int, changes: dict) -> Task:
    """Apply a partial update; only keys present in `changes` are written."""
    task = get_task(db, user_id, task_id)

    start_time = normalize_hhmm(changes["start_time"], "start_time") if "start_time" in changes else task.start_time
    end_time = normalize_hhmm(changes["end_time"], "end_time") if "end_time" in changes else task.end_time
    day = changes.get("day", task.day)
    if {"start_time", "end_time", "day"} & changes.keys():
        _check_slot(db, user_id, day, start_time, end_time, exclude_task_id=task.id)

    if "title" in changes:
        task.title = changes["title"].strip()
    if "description" in changes:
        task.description = (changes["description"] or "").strip()
    if "category" in changes:
        task.category = changes["category"].strip()
    if "completed" in changes:
        task.completed = bool(changes["completed"])
    if "attachments" in changes:
        task.attachments = json.dumps(changes["attachments"] or [])
    task.start_time = start_time
    task.end_time = end_time
    task.day = day

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user_id: int, task_id: int) -> None:
    task = get_task(db, user_id, task_id)
    db.delete(task)
    db.commit()


def toggle_task(db: Session, user_id: int, task_id: int) -> Task:
    """Flip the completion flag of an owned task."""
    task = get_task(db, user_id, task_id)
    task.completed = not bool(task.completed)
    db.commit()
    db.refresh(task)
    return task


def task_to_dict(task: Task) -> dict:
    try:
        attachments = json.loads(task.attachments) if task.attachments else []
    except json.JSONDecodeError:
        attachments = []
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "category": task.category,
        "start_time": task.start_time,
        "end_time": task.end_time,
        "date": task.day.isoformat(),
        "completed": bool(task.completed),
        "attachments": attachments,
        "created_at": task.created_at.isoformat() if task.created_at else None,
    }
