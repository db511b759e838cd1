from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from sqlalchemy.orm import Session

from db.models import Habit, HabitLog
from db.queries import get_habit_for_owner, save_habit
from utils.datetime_utils import calendar_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    habit: Habit
    completed_today: bool


@dataclass(frozen=True)
class ToggleOutcome:
    current_streak: int
    completed_today: bool
    append_today: bool


def _log_for(logs: Iterable[HabitLog], day: date) -> HabitLog | None:
    for log in logs:
        if calendar_day(log.day) == day:
            return log
    return None


def completed_on(logs: Iterable[HabitLog], day: date) -> bool:
    """True when the log set holds a completed entry for `day`."""
    log = _log_for(logs, day)
    return bool(log and log.completed)


def trailing_streak(logs: Iterable[HabitLog], today: date) -> int:
    """Consecutive completed days ending today; 0 when today is not completed."""
    done = {calendar_day(log.day) for log in logs if log.completed}
    streak = 0
    cursor = today
    while cursor in done:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def apply_toggle(logs: list[HabitLog], current_streak: int, today: date) -> ToggleOutcome:
    """
    Streak state machine for one toggle of today's completion.

    Completing today extends the streak when yesterday is completed and
    restarts it at 1 otherwise. Un-completing today always yields 0, it
    does not restore the streak held before today was completed.
    """
    today_log = _log_for(logs, today)
    completed_today = True if today_log is None else not bool(today_log.completed)
    if not completed_today:
        return ToggleOutcome(current_streak=0, completed_today=False, append_today=False)

    if completed_on(logs, today - timedelta(days=1)):
        streak = max(int(current_streak or 0), 0) + 1
    else:
        streak = 1
    return ToggleOutcome(current_streak=streak, completed_today=True, append_today=today_log is None)


def toggle_habit(db: Session, user_id: int, habit_id: int, now: datetime) -> ToggleResult:
    """Flip today's completion for a habit and persist logs + streak together."""
    today = calendar_day(now)
    habit = get_habit_for_owner(db, user_id, habit_id, for_update=True)

    outcome = apply_toggle(list(habit.logs), habit.current_streak, today)
    if outcome.append_today:
        habit.logs.append(HabitLog(day=today, completed=True))
    else:
        _log_for(habit.logs, today).completed = outcome.completed_today
    habit.current_streak = outcome.current_streak

    save_habit(db, habit)
    logger.debug(
        "Habit %s toggled for %s: completed=%s streak=%s",
        habit.id,
        today.isoformat(),
        outcome.completed_today,
        outcome.current_streak,
    )
    return ToggleResult(habit=habit, completed_today=outcome.completed_today)
