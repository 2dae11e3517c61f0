"""Top-of-leaderboard reads."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import select
from sqlmodel import Session

from ..core.config import LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT
from ..core.time import isoformat_utc
from ..models import LeaderboardRow, leaderboard_view

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def clamp_limit(raw: Union[str, Sequence[str], int, None]) -> int:
    """Parse a ``limit`` query value into ``[1, LEADERBOARD_MAX_LIMIT]``.

    Leading digits are read the way a browser's ``parseInt`` reads them.
    Missing or non-numeric values fall back to the default; anything else is
    clamped, so ``0`` reads as ``1``.
    """

    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    if raw is None:
        return LEADERBOARD_DEFAULT_LIMIT
    match = _LEADING_INT.match(str(raw))
    if not match:
        return LEADERBOARD_DEFAULT_LIMIT
    value = int(match.group(1))
    return min(max(1, value), LEADERBOARD_MAX_LIMIT)


def top_entries(session: Session, limit: Optional[int] = None) -> List[LeaderboardRow]:
    """Highest scores first, read from the email-free leaderboard view."""

    limit = clamp_limit(limit)
    statement = (
        select(leaderboard_view)
        .order_by(leaderboard_view.c.score.desc())
        .limit(limit)
    )
    rows = session.exec(statement).mappings().all()
    return [LeaderboardRow(**row) for row in rows]


def row_to_dict(row: LeaderboardRow, rank: int) -> Dict[str, Any]:
    return {
        "rank": rank,
        "id": str(row.id),
        "displayName": row.display_name,
        "score": row.score,
        "maxTierReached": row.max_tier_reached,
        "piecesMerged": row.pieces_merged,
        "gameDurationSeconds": row.game_duration_seconds,
        "createdAt": isoformat_utc(row.created_at),
        "userId": str(row.user_id),
    }


def rank_page(rows: Sequence[LeaderboardRow]) -> List[Dict[str, Any]]:
    """Label rows 1..k by their position in this page."""

    return [row_to_dict(row, index) for index, row in enumerate(rows, start=1)]


__all__ = ["clamp_limit", "rank_page", "row_to_dict", "top_entries"]
