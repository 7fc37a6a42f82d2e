"""Owner-scoped entity lookup shared by the habit, rule and challenge services."""
from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from foundations.core.errors import ForbiddenError, NotFoundError

T = TypeVar("T")


def get_owned(db: Session, model: type[T], kind: str, entity_id: int, user_id: int) -> T:
    """
    Load `model` by primary key and check it belongs to `user_id`.
    Raises NotFoundError if missing, ForbiddenError if owned by someone else.
    """
    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(kind, entity_id)
    if entity.user_id != user_id:
        raise ForbiddenError(kind, entity_id)
    return entity
