"""Storage operations the productivity engine reads and writes through."""

from __future__ import annotations

from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from db.models import DailyReview, Habit, Task
from services.errors import Conflict, NotFound


def list_tasks_for_owner_in_range(
    db: Session,
    user_id: int,
    start_day: date,
    end_day_exclusive: date | None = None,
) -> list[Task]:
    query = db.query(Task).filter(Task.user_id == user_id, Task.day >= start_day)
    if end_day_exclusive is not None:
        query = query.filter(Task.day < end_day_exclusive)
    return query.order_by(Task.day.asc(), Task.start_time.asc(), Task.id.asc()).all()


def list_habits_for_owner(db: Session, user_id: int) -> list[Habit]:
    return (
        db.query(Habit)
        .options(selectinload(Habit.logs))
        .filter(Habit.user_id == user_id)
        .order_by(Habit.created_at.asc(), Habit.id.asc())
        .all()
    )


def get_habit_for_owner(db: Session, user_id: int, habit_id: int, *, for_update: bool = False) -> Habit:
    query = db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    habit = query.first()
    if habit is None:
        raise NotFound("Habit not found")
    return habit


def find_review(db: Session, user_id: int, day: date) -> DailyReview | None:
    return (
        db.query(DailyReview)
        .filter(DailyReview.user_id == user_id, DailyReview.day == day)
        .first()
    )


def save_habit(db: Session, habit: Habit) -> Habit:
    """Write the habit, its log set and cached streak in one commit."""
    db.add(habit)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Habit already has a log entry for that day")
    db.refresh(habit)
    return habit


def create_review(db: Session, review: DailyReview) -> DailyReview:
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"Daily review already exists for {review.day.isoformat()}")
    db.refresh(review)
    return review
