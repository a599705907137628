"""Tombstone helpers shared by every soft-deletable table.

A row is live while ``deleted_at`` is NULL. Queries go through ``live()`` so
the filter is applied the same way everywhere.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Query

from glimpse.utils.clock import utcnow


def live(query: Query, model) -> Query:
    return query.filter(model.deleted_at.is_(None))


def tombstoned(query: Query, model) -> Query:
    return query.filter(model.deleted_at.isnot(None))


def tombstone(obj, when: Optional[datetime] = None) -> None:
    obj.deleted_at = when or utcnow()


def restore(obj) -> None:
    obj.deleted_at = None
