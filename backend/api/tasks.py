from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.common import to_http_error
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.errors import ProductivityError
from services.task_service import (
    TimeSlotConflict,
    create_task,
    delete_task,
    get_task,
    list_tasks_for_day,
    task_to_dict,
    toggle_task,
    update_task,
)
from utils.datetime_utils import parse_day

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(get_current_user)])


class TaskCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: str = Field(min_length=1, max_length=50)
    start_time: str
    end_time: str
    date: date_type
    attachments: list[str] = Field(default_factory=list)


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    date: Optional[date_type] = None
    completed: Optional[bool] = None
    attachments: Optional[list[str]] = None


def _conflict_response(exc: TimeSlotConflict) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "detail": str(exc),
            "conflicting_tasks": [
                {"id": t.id, "title": t.title, "start_time": t.start_time, "end_time": t.end_time}
                for t in exc.conflicting
            ],
        },
    )


@router.get("")
def list_tasks(
    date: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        day = parse_day(date)
    except ProductivityError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return [task_to_dict(t) for t in list_tasks_for_day(db, user.id, day)]


@router.get("/{task_id}")
def read_task(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return task_to_dict(get_task(db, user.id, task_id))
    except ProductivityError as exc:
        raise to_http_error(exc)


@router.post("", status_code=201)
def add_task(
    req: TaskCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        task = create_task(
            db,
            user.id,
            title=req.title,
            description=req.description,
            category=req.category,
            start_time=req.start_time,
            end_time=req.end_time,
            day=req.date,
            attachments=req.attachments,
        )
    except TimeSlotConflict as exc:
        return _conflict_response(exc)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return task_to_dict(task)


@router.put("/{task_id}")
def edit_task(
    task_id: int,
    req: TaskUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    if "date" in changes:
        changes["day"] = changes.pop("date")
    try:
        task = update_task(db, user.id, task_id, changes)
    except TimeSlotConflict as exc:
        return _conflict_response(exc)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return task_to_dict(task)


@router.delete("/{task_id}")
def remove_task(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        delete_task(db, user.id, task_id)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return {"status": "deleted", "id": task_id}


@router.patch("/{task_id}/toggle")
def toggle_completion(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        task = toggle_task(db, user.id, task_id)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return task_to_dict(task)
