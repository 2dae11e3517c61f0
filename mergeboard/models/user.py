"""Database model for players who submit scores."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class User(SQLModel, table=True):
    """Player identity, keyed by email when one was supplied.

    Anonymous players have ``email = None`` and a unique ``anon_key`` instead.
    """

    __tablename__ = "users"

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    email: Optional[str] = ORMField(default=None, unique=True, max_length=254)
    anon_key: Optional[str] = ORMField(default=None, unique=True, max_length=64)
    display_name: Optional[str] = ORMField(default=None, max_length=24)
    created_at: datetime = ORMField(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = ORMField(default_factory=utcnow, sa_type=DateTime(timezone=True))

    @property
    def is_anonymous(self) -> bool:
        return self.email is None


__all__ = ["User"]
