"""Database model for submitted scores."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class ScoreEntry(SQLModel, table=True):
    """One finished game. Rows are append-only."""

    __tablename__ = "scores"

    id: uuid.UUID = ORMField(default_factory=uuid.uuid4, primary_key=True, nullable=False)
    user_id: uuid.UUID = ORMField(foreign_key="users.id", index=True)
    score: int = ORMField(index=True)
    max_tier_reached: Optional[int] = None
    pieces_merged: Optional[int] = None
    game_duration_seconds: Optional[int] = None
    created_at: datetime = ORMField(default_factory=utcnow, sa_type=DateTime(timezone=True))


__all__ = ["ScoreEntry"]
