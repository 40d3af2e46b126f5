from __future__ import annotations

import uuid

from fastapi import HTTPException
from sqlalchemy.orm import Query, Session


def coerce_uuid(value) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def try_coerce_uuid(value) -> uuid.UUID | None:
    """Like coerce_uuid, but returns None for malformed ids."""
    try:
        return coerce_uuid(value)
    except (TypeError, ValueError):
        return None


def get_or_404(db: Session, model, obj_id, detail: str | None = None):
    key = try_coerce_uuid(obj_id)
    obj = db.get(model, key) if key else None
    if not obj:
        raise HTTPException(status_code=404, detail=detail or f"{model.__name__} not found")
    return obj


def apply_pagination(query: Query, limit: int, offset: int) -> Query:
    return query.limit(limit).offset(offset)
