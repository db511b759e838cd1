from datetime import datetime
from sqlalchemy import (
    Column, Integer, Text, Boolean, ForeignKey, Index,
    Date, DateTime,
)
from sqlalchemy.orm import relationship
from db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, unique=True, nullable=False)
    username_normalized = Column(Text, unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)
    dark_mode = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    habits = relationship("Habit", back_populates="user", cascade="all, delete-orphan")
    daily_reviews = relationship("DailyReview", back_populates="user", cascade="all, delete-orphan")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False)  # free text, not an enum
    start_time = Column(Text, nullable=False)  # HH:MM
    end_time = Column(Text, nullable=False)  # HH:MM
    day = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    attachments = Column(Text)  # JSON array of URLs
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="tasks")


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(Text, nullable=False)
    emoji = Column(Text, nullable=False, default="✅")
    # Cached; only the toggle path writes it, together with logs.
    current_streak = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="habits")
    logs = relationship(
        "HabitLog",
        back_populates="habit",
        cascade="all, delete-orphan",
        order_by="HabitLog.day",
    )


class HabitLog(Base):
    __tablename__ = "habit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False)
    day = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    habit = relationship("Habit", back_populates="logs")


class DailyReview(Base):
    __tablename__ = "daily_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    day = Column(Date, nullable=False)
    tasks_completed = Column(Integer, nullable=False, default=0)
    tasks_total = Column(Integer, nullable=False, default=0)
    habits_completed = Column(Integer, nullable=False, default=0)
    habits_total = Column(Integer, nullable=False, default=0)
    productivity_score = Column(Integer, nullable=False)  # 0-100
    ai_comment = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="daily_reviews")


# Indexes
Index("idx_tasks_user_day", Task.user_id, Task.day)
Index("idx_habits_user_created", Habit.user_id, Habit.created_at)
Index("idx_habit_logs_unique_day", HabitLog.habit_id, HabitLog.day, unique=True)
Index("idx_daily_reviews_unique_day", DailyReview.user_id, DailyReview.day, unique=True)
