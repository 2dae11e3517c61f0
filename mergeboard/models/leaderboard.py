"""Read-only projection of scores joined to display names."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, Uuid
from sqlmodel import SQLModel

LEADERBOARD_VIEW_NAME = "leaderboard"

# Kept out of SQLModel.metadata so create_all never builds it as a table.
view_metadata = MetaData()

leaderboard_view = Table(
    LEADERBOARD_VIEW_NAME,
    view_metadata,
    Column("id", Uuid, primary_key=True),
    Column("display_name", String),
    Column("score", Integer),
    Column("max_tier_reached", Integer),
    Column("pieces_merged", Integer),
    Column("game_duration_seconds", Integer),
    Column("created_at", DateTime(timezone=True)),
    Column("user_id", Uuid),
)


class LeaderboardRow(SQLModel):
    """A leaderboard line. Has no email column."""

    id: uuid.UUID
    display_name: Optional[str] = None
    score: int
    max_tier_reached: Optional[int] = None
    pieces_merged: Optional[int] = None
    game_duration_seconds: Optional[int] = None
    created_at: datetime
    user_id: uuid.UUID


__all__ = ["LEADERBOARD_VIEW_NAME", "LeaderboardRow", "leaderboard_view", "view_metadata"]
