from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from foundations.db.base import Base


class Challenge(Base):
    """Fixed-duration commitment (40 / 70 / 100-day programs)."""

    __tablename__ = "challenges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    # Fixed at creation; day numbers are counted from here.
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ChallengeDayLog(Base):
    """Completion of day number N (not a calendar date) within a challenge."""

    __tablename__ = "challenge_day_logs"
    __table_args__ = (
        UniqueConstraint("challenge_id", "day_number", name="uq_challenge_day_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    challenge_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
