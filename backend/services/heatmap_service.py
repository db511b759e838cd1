from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from config import settings
from db.queries import list_habits_for_owner, list_tasks_for_owner_in_range
from services.errors import InvalidState
from utils.datetime_utils import calendar_day

logger = logging.getLogger(__name__)


@dataclass
class HeatmapBucket:
    day: date
    task_count: int = 0
    habit_count: int = 0

    @property
    def total(self) -> int:
        return self.task_count + self.habit_count


def build_heatmap(
    db: Session,
    user_id: int,
    now: datetime,
    window_days: int | None = None,
) -> dict[date, HeatmapBucket]:
    """
    Bucket completed tasks and habit logs by calendar day over a trailing window.

    Only days with at least one completed activity get a bucket; the window
    starts `window_days` before today and has no upper bound.
    """
    if window_days is None:
        window_days = settings.HEATMAP_WINDOW_DAYS
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
        raise InvalidState("window_days must be a positive integer")

    window_start = calendar_day(now) - timedelta(days=window_days)
    buckets: dict[date, HeatmapBucket] = {}

    def _bucket(day: date) -> HeatmapBucket:
        if day not in buckets:
            buckets[day] = HeatmapBucket(day=day)
        return buckets[day]

    for task in list_tasks_for_owner_in_range(db, user_id, window_start):
        if task.completed:
            _bucket(calendar_day(task.day)).task_count += 1

    # Habit history is fetched whole and filtered here.
    for habit in list_habits_for_owner(db, user_id):
        for log in habit.logs:
            day = calendar_day(log.day)
            if log.completed and day >= window_start:
                _bucket(day).habit_count += 1

    logger.debug("Heatmap for user %s: %s active days since %s", user_id, len(buckets), window_start.isoformat())
    return buckets


def heatmap_rows(buckets: dict[date, HeatmapBucket]) -> list[dict]:
    return [
        {
            "date": day.isoformat(),
            "tasks": bucket.task_count,
            "habits": bucket.habit_count,
            "total": bucket.total,
        }
        for day, bucket in sorted(buckets.items())
    ]
