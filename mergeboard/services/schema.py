"""Schema provisioning for deployments and local development."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from ..models import LEADERBOARD_VIEW_NAME, ScoreEntry, User

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (User.__tablename__, ScoreEntry.__tablename__)

_VIEW_SELECT = f"""
SELECT
    s.id,
    u.display_name,
    s.score,
    s.max_tier_reached,
    s.pieces_merged,
    s.game_duration_seconds,
    s.created_at,
    s.user_id
FROM {ScoreEntry.__tablename__} AS s
JOIN {User.__tablename__} AS u ON u.id = s.user_id
"""


def provision_schema(engine: Engine) -> None:
    """Create missing tables and (re)create the leaderboard view.

    Existing tables and their rows are left untouched.
    """

    SQLModel.metadata.create_all(engine, tables=[User.__table__, ScoreEntry.__table__])
    with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            conn.execute(text(f"CREATE OR REPLACE VIEW {LEADERBOARD_VIEW_NAME} AS {_VIEW_SELECT}"))
        else:
            conn.execute(text(f"DROP VIEW IF EXISTS {LEADERBOARD_VIEW_NAME}"))
            conn.execute(text(f"CREATE VIEW {LEADERBOARD_VIEW_NAME} AS {_VIEW_SELECT}"))
    logger.info("Provisioned schema on %s", engine.url.render_as_string(hide_password=True))


__all__ = ["REQUIRED_TABLES", "provision_schema"]
