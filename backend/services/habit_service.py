from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from config import settings
from db.models import Habit
from db.queries import get_habit_for_owner, list_habits_for_owner
from services.errors import InvalidState
from services.streak_service import completed_on

MAX_NAME_LENGTH = 100


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidState("Habit name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InvalidState(f"Habit name cannot exceed {MAX_NAME_LENGTH} characters")
    return cleaned


def create_habit(db: Session, user_id: int, name: str, emoji: str | None = None) -> Habit:
    habit = Habit(
        user_id=user_id,
        name=_clean_name(name),
        emoji=(emoji or "").strip() or settings.DEFAULT_HABIT_EMOJI,
        current_streak=0,
    )
    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def update_habit(db: Session, user_id: int, habit_id: int, *, name: str | None = None, emoji: str | None = None) -> Habit:
    """Rename a habit or change its emoji; logs and streak are left alone."""
    habit = get_habit_for_owner(db, user_id, habit_id)
    if name is not None:
        habit.name = _clean_name(name)
    if emoji is not None:
        habit.emoji = emoji.strip() or settings.DEFAULT_HABIT_EMOJI
    db.commit()
    db.refresh(habit)
    return habit


def delete_habit(db: Session, user_id: int, habit_id: int) -> None:
    habit = get_habit_for_owner(db, user_id, habit_id)
    db.delete(habit)
    db.commit()


def list_habits(db: Session, user_id: int) -> list[Habit]:
    return list_habits_for_owner(db, user_id)


def habit_to_dict(habit: Habit, today: date) -> dict:
    return {
        "id": habit.id,
        "name": habit.name,
        "emoji": habit.emoji,
        "current_streak": int(habit.current_streak or 0),
        "completed_today": completed_on(habit.logs, today),
        "logs": [{"date": log.day.isoformat(), "completed": bool(log.completed)} for log in habit.logs],
        "created_at": habit.created_at.isoformat() if habit.created_at else None,
    }
