from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from foundations.db.base import Base


class HabitCategory(str, enum.Enum):
    mind = "mind"
    body = "body"
    soul = "soul"


class TimeOfDay(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    anytime = "anytime"


class Habit(Base):
    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        Enum(HabitCategory, name="habit_category_enum"),
        nullable=False,
        default=HabitCategory.mind,
    )
    frequency: Mapped[str] = mapped_column(String(32), nullable=False, default="daily")
    time_of_day: Mapped[str] = mapped_column(
        Enum(TimeOfDay, name="time_of_day_enum"),
        nullable=False,
        default=TimeOfDay.anytime,
    )
    reasons: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON array of the three reasons behind the habit",
    )
    # Caches of the values derived from completion_records.
    streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
