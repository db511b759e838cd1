from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.orm import Session

from config import settings
from db.models import DailyReview
from db.queries import create_review, find_review, list_habits_for_owner, list_tasks_for_owner_in_range
from services.errors import Conflict, InvalidState, NotFound
from services.narrative_service import generate_comment, round_half_up
from services.streak_service import completed_on
from utils.datetime_utils import calendar_day, day_window

logger = logging.getLogger(__name__)

TASK_WEIGHT = 60
HABIT_WEIGHT = 40


@dataclass(frozen=True)
class DayTotals:
    tasks_completed: int
    tasks_total: int
    habits_completed: int
    habits_total: int


@dataclass(frozen=True)
class EndDayResult:
    review: DailyReview
    created: bool


def compute_productivity_score(
    tasks_completed: int,
    tasks_total: int,
    habits_completed: int,
    habits_total: int,
) -> int:
    """Weighted 0-100 score: 60 points for tasks, 40 for habits."""
    task_score = (tasks_completed / tasks_total) * TASK_WEIGHT if tasks_total > 0 else 0
    habit_score = (habits_completed / habits_total) * HABIT_WEIGHT if habits_total > 0 else 0
    return round_half_up(task_score + habit_score)


def gather_day_totals(db: Session, user_id: int, day: date) -> DayTotals:
    """Count the owner's tasks on `day` and habits completed on `day`."""
    start, end = day_window(day)
    tasks = list_tasks_for_owner_in_range(db, user_id, start, end)
    habits = list_habits_for_owner(db, user_id)
    return DayTotals(
        tasks_completed=sum(1 for t in tasks if t.completed),
        tasks_total=len(tasks),
        habits_completed=sum(1 for h in habits if completed_on(h.logs, day)),
        habits_total=len(habits),
    )


def end_day(db: Session, user_id: int, now: datetime) -> EndDayResult:
    """Create today's review, or return the one that already exists."""
    today = calendar_day(now)

    existing = find_review(db, user_id, today)
    if existing is not None:
        return EndDayResult(review=existing, created=False)

    totals = gather_day_totals(db, user_id, today)
    score = compute_productivity_score(
        totals.tasks_completed,
        totals.tasks_total,
        totals.habits_completed,
        totals.habits_total,
    )
    comment = generate_comment(
        score,
        totals.tasks_completed,
        totals.tasks_total,
        totals.habits_completed,
        totals.habits_total,
    )
    review = DailyReview(
        user_id=user_id,
        day=today,
        tasks_completed=totals.tasks_completed,
        tasks_total=totals.tasks_total,
        habits_completed=totals.habits_completed,
        habits_total=totals.habits_total,
        productivity_score=score,
        ai_comment=comment[: settings.REVIEW_COMMENT_MAX_LENGTH],
    )

    try:
        review = create_review(db, review)
    except Conflict:
        winner = find_review(db, user_id, today)
        if winner is None:
            raise
        logger.warning("Daily review for user %s on %s was created concurrently", user_id, today.isoformat())
        return EndDayResult(review=winner, created=False)

    logger.info("Daily review %s created for user %s on %s (score %s)", review.id, user_id, today.isoformat(), score)
    return EndDayResult(review=review, created=True)


def list_reviews(db: Session, user_id: int, limit: int | None = None) -> list[DailyReview]:
    query = db.query(DailyReview).filter(DailyReview.user_id == user_id).order_by(DailyReview.day.desc())
    if limit is not None:
        if limit < 1:
            raise InvalidState("limit must be a positive integer")
        query = query.limit(limit)
    return query.all()


def get_review(db: Session, user_id: int, day: date) -> DailyReview:
    review = find_review(db, user_id, day)
    if review is None:
        raise NotFound("Daily review not found")
    return review


def review_to_dict(review: DailyReview) -> dict:
    return {
        "id": review.id,
        "date": review.day.isoformat(),
        "tasks_completed": review.tasks_completed,
        "tasks_total": review.tasks_total,
        "habits_completed": review.habits_completed,
        "habits_total": review.habits_total,
        "productivity_score": review.productivity_score,
        "ai_comment": review.ai_comment,
        "created_at": review.created_at.isoformat() if review.created_at else None,
    }
