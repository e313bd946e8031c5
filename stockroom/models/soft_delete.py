# stockroom/models/soft_delete.py
"""
Soft-delete convention shared by every inventory table.

`deleted_at` is NULL while a row is active and holds the deletion time
(UTC) once it has been soft-deleted. Queries pick one of three scopes:

  - active  : deleted_at IS NULL
  - deleted : deleted_at IS NOT NULL
  - all     : no filter
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeleteScope(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"
    ALL = "all"


class SoftDeleteMixin(SQLModel):
    """
    Adds the deletion marker. Mixed into table models.
    """

    deleted_at: datetime | None = Field(
        default=None,
        index=True,
        description="Soft-delete timestamp (UTC); NULL while active",
    )


def active_unique_index(name: str, *columns: str) -> Index:
    """
    Unique index that only covers active rows.

    A soft-deleted row keeps its key, so the same name/email/code may exist
    once among active rows and any number of times among deleted ones.
    """
    where: Any = text("deleted_at IS NULL")
    return Index(
        name,
        *columns,
        unique=True,
        sqlite_where=where,
        postgresql_where=where,
    )
