from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.common import get_now, to_http_error
from auth.utils import get_current_user
from db.database import get_db
from db.models import User
from services.errors import ProductivityError
from services.habit_service import create_habit, delete_habit, habit_to_dict, list_habits, update_habit
from services.streak_service import toggle_habit
from utils.datetime_utils import calendar_day

router = APIRouter(prefix="/habits", tags=["habits"], dependencies=[Depends(get_current_user)])


class HabitCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    emoji: Optional[str] = None


class HabitUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    emoji: Optional[str] = None


@router.get("")
def get_habits(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    today = calendar_day(now)
    return [habit_to_dict(h, today) for h in list_habits(db, user.id)]


@router.post("", status_code=201)
def add_habit(
    req: HabitCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        habit = create_habit(db, user.id, req.name, req.emoji)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return habit_to_dict(habit, calendar_day(now))


@router.patch("/{habit_id}/toggle")
def toggle(
    habit_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        result = toggle_habit(db, user.id, habit_id, now)
    except ProductivityError as exc:
        raise to_http_error(exc)
    payload = habit_to_dict(result.habit, calendar_day(now))
    payload["completed_today"] = result.completed_today
    return payload


@router.put("/{habit_id}")
def edit_habit(
    habit_id: int,
    req: HabitUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        habit = update_habit(db, user.id, habit_id, name=req.name, emoji=req.emoji)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return habit_to_dict(habit, calendar_day(now))


@router.delete("/{habit_id}")
def remove_habit(
    habit_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        delete_habit(db, user.id, habit_id)
    except ProductivityError as exc:
        raise to_http_error(exc)
    return {"status": "deleted", "id": habit_id}
