"""
Completion Ledger — (entity, day) → completed, at most one row per pair.

Public API
----------
set_completion(db, kind, entity_id, day, completed) -> CompletionRecord
toggle_completion(db, kind, entity_id, day)         -> CompletionRecord
get_completion(db, kind, entity_id, day)            -> CompletionRecord | None
history(db, kind, entity_id)                        -> list[CompletionRecord]  (newest first)
completed_days(db, kind, entity_id)                 -> set[date]
delete_history(db, kind, entity_id)                 -> int

Atomicity
---------
set_completion and toggle_completion each issue a single
INSERT ... ON CONFLICT DO UPDATE against the uq_completion_entity_day
constraint on PostgreSQL and SQLite, so two racing toggles for the same
entity-day never lose an update. Other dialects insert inside a savepoint
and fall back to UPDATE on IntegrityError.

Nothing here commits; the calling service owns the transaction.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import delete, func, not_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foundations.models.completion import CompletionRecord

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _pair_filter(kind: str, entity_id: int, day: date):
    return (
        CompletionRecord.entity_kind == kind,
        CompletionRecord.entity_id == entity_id,
        CompletionRecord.day == day,
    )


def _upsert(db: Session, kind: str, entity_id: int, day: date, completed: Optional[bool]) -> None:
    """
    Insert-or-update one (kind, entity_id, day) row in a single statement.
    completed=None flips the stored flag (a new row starts as completed).
    """
    new_value = not_(CompletionRecord.__table__.c.completed) if completed is None else completed
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(CompletionRecord).values(
            entity_kind=kind,
            entity_id=entity_id,
            day=day,
            completed=True if completed is None else completed,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["entity_kind", "entity_id", "day"],
            set_={"completed": new_value, "updated_at": func.now()},
        )
        db.execute(stmt)
        return

    try:
        with db.begin_nested():
            db.add(CompletionRecord(
                entity_kind=kind,
                entity_id=entity_id,
                day=day,
                completed=True if completed is None else completed,
            ))
    except IntegrityError:
        db.execute(
            update(CompletionRecord)
            .where(*_pair_filter(kind, entity_id, day))
            .values(completed=new_value)
        )


def _load(db: Session, kind: str, entity_id: int, day: date) -> CompletionRecord:
    return db.execute(
        select(CompletionRecord)
        .where(*_pair_filter(kind, entity_id, day))
        .execution_options(populate_existing=True)
    ).scalar_one()


def set_completion(
    db: Session,
    kind: str,
    entity_id: int,
    day: date,
    completed: bool,
) -> CompletionRecord:
    """Idempotent upsert. Returns the resulting (refreshed) record."""
    _upsert(db, kind, entity_id, day, completed)
    record = _load(db, kind, entity_id, day)
    logger.debug("ledger %s:%s %s -> %s", kind, entity_id, day, completed)
    return record


def toggle_completion(db: Session, kind: str, entity_id: int, day: date) -> CompletionRecord:
    """Atomically flip the flag for one day (absent counts as not completed)."""
    _upsert(db, kind, entity_id, day, None)
    record = _load(db, kind, entity_id, day)
    logger.debug("ledger %s:%s %s toggled -> %s", kind, entity_id, day, record.completed)
    return record


def get_completion(
    db: Session,
    kind: str,
    entity_id: int,
    day: date,
) -> Optional[CompletionRecord]:
    return db.execute(
        select(CompletionRecord).where(*_pair_filter(kind, entity_id, day))
    ).scalar_one_or_none()


def history(db: Session, kind: str, entity_id: int) -> list[CompletionRecord]:
    """All records for one entity, most recent day first."""
    return list(
        db.execute(
            select(CompletionRecord)
            .where(
                CompletionRecord.entity_kind == kind,
                CompletionRecord.entity_id == entity_id,
            )
            .order_by(CompletionRecord.day.desc())
        ).scalars()
    )


def completed_days(db: Session, kind: str, entity_id: int) -> set[date]:
    rows = db.execute(
        select(CompletionRecord.day).where(
            CompletionRecord.entity_kind == kind,
            CompletionRecord.entity_id == entity_id,
            CompletionRecord.completed == True,  # noqa: E712
        )
    ).scalars()
    return set(rows)


def delete_history(db: Session, kind: str, entity_id: int) -> int:
    """Remove every record of one entity. Returns the number of rows deleted."""
    result = db.execute(
        delete(CompletionRecord).where(
            CompletionRecord.entity_kind == kind,
            CompletionRecord.entity_id == entity_id,
        )
    )
    return result.rowcount or 0
