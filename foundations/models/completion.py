"""
CompletionRecord — one entity's disposition on one calendar day.

One row per (entity_kind, entity_id, day); the unique constraint is what the
ledger upsert conflicts on, so a toggle always mutates the existing row.

entity_kind values:
  "habit" — entity_id references habits.id
  "rule"  — entity_id references rules.id ("kept today")
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Boolean, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from foundations.db.base import Base


class EntityKind:
    HABIT = "habit"
    RULE  = "rule"


class CompletionRecord(Base):
    __tablename__ = "completion_records"
    __table_args__ = (
        UniqueConstraint("entity_kind", "entity_id", "day", name="uq_completion_entity_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    entity_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
