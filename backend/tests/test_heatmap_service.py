from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db.database import Base  # noqa: E402
from db.models import Habit, HabitLog, Task, User  # noqa: E402
from services.errors import InvalidState  # noqa: E402
from services.heatmap_service import build_heatmap, heatmap_rows  # noqa: E402


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
TODAY = date(2026, 3, 10)


def _new_db():
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _new_user(db, username: str = "heat") -> User:
    user = User(
        username=username,
        username_normalized=username.lower(),
        password_hash="hash",
        display_name="Heat",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _task(user: User, day: date, completed: bool) -> Task:
    return Task(
        user_id=user.id,
        title="t",
        category="c",
        start_time="08:00",
        end_time="09:00",
        day=day,
        completed=completed,
    )


def test_heatmap_counts_completed_tasks_and_habit_logs_per_day():
    db = _new_db()
    user = _new_user(db)
    db.add_all(
        [
            _task(user, TODAY, True),
            _task(user, TODAY, True),
            _task(user, TODAY, False),
            _task(user, TODAY - timedelta(days=3), True),
        ]
    )
    habit = Habit(user_id=user.id, name="h", emoji="✅", current_streak=1)
    habit.logs.append(HabitLog(day=TODAY, completed=True))
    habit.logs.append(HabitLog(day=TODAY - timedelta(days=1), completed=True))
    db.add(habit)
    db.commit()

    buckets = build_heatmap(db, user.id, NOW)

    assert set(buckets) == {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3)}
    today = buckets[TODAY]
    assert (today.task_count, today.habit_count, today.total) == (2, 1, 3)
    assert buckets[TODAY - timedelta(days=1)].total == 1
    assert buckets[TODAY - timedelta(days=3)].task_count == 1


def test_heatmap_is_sparse():
    db = _new_db()
    user = _new_user(db)
    db.add(_task(user, TODAY - timedelta(days=2), False))
    habit = Habit(user_id=user.id, name="h", emoji="✅", current_streak=0)
    habit.logs.append(HabitLog(day=TODAY - timedelta(days=4), completed=False))
    db.add(habit)
    db.commit()

    buckets = build_heatmap(db, user.id, NOW)

    assert buckets == {}
    assert TODAY - timedelta(days=2) not in buckets
    assert TODAY - timedelta(days=4) not in buckets


def test_heatmap_window_start_is_inclusive():
    db = _new_db()
    user = _new_user(db)
    start = TODAY - timedelta(days=365)
    db.add_all([_task(user, start, True), _task(user, start - timedelta(days=1), True)])
    habit = Habit(user_id=user.id, name="h", emoji="✅", current_streak=0)
    habit.logs.append(HabitLog(day=start, completed=True))
    habit.logs.append(HabitLog(day=start - timedelta(days=1), completed=True))
    db.add(habit)
    db.commit()

    buckets = build_heatmap(db, user.id, NOW)

    assert list(buckets) == [start]
    assert (buckets[start].task_count, buckets[start].habit_count) == (1, 1)


def test_heatmap_custom_window_and_other_owners_excluded():
    db = _new_db()
    user = _new_user(db, "mine")
    other = _new_user(db, "theirs")
    db.add_all(
        [
            _task(user, TODAY - timedelta(days=5), True),
            _task(user, TODAY - timedelta(days=10), True),
            _task(other, TODAY, True),
        ]
    )
    db.commit()

    buckets = build_heatmap(db, user.id, NOW, window_days=7)

    assert list(buckets) == [TODAY - timedelta(days=5)]


def test_heatmap_rejects_non_positive_window():
    db = _new_db()
    user = _new_user(db)
    with pytest.raises(InvalidState):
        build_heatmap(db, user.id, NOW, window_days=0)


def test_heatmap_rows_are_day_sorted():
    db = _new_db()
    user = _new_user(db)
    db.add_all([_task(user, TODAY, True), _task(user, TODAY - timedelta(days=9), True)])
    db.commit()

    rows = heatmap_rows(build_heatmap(db, user.id, NOW))

    assert rows == [
        {"date": (TODAY - timedelta(days=9)).isoformat(), "tasks": 1, "habits": 0, "total": 1},
        {"date": TODAY.isoformat(), "tasks": 1, "habits": 0, "total": 1},
    ]
