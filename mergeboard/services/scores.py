"""Score recording and placement."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..core.time import isoformat_utc
from ..models import ScoreEntry, User

logger = logging.getLogger(__name__)


def record_score(
    session: Session,
    user_id: uuid.UUID,
    score: int,
    *,
    max_tier_reached: Optional[int] = None,
    pieces_merged: Optional[int] = None,
    game_duration_seconds: Optional[int] = None,
) -> ScoreEntry:
    """Append a score row for ``user_id``.

    There is deliberately no update or delete counterpart.
    """

    entry = ScoreEntry(
        user_id=user_id,
        score=score,
        max_tier_reached=max_tier_reached,
        pieces_merged=pieces_merged,
        game_duration_seconds=game_duration_seconds,
    )
    session.add(entry)
    session.flush()
    logger.debug("Recorded score %s for user %s", score, user_id)
    return entry


def placement_for(session: Session, score: int) -> int:
    """One plus the number of distinct users holding a strictly higher score.

    This runs as its own read after the score is committed, so concurrent
    submissions landing in between can shift the answer slightly.
    """

    higher = session.exec(
        select(func.count(func.distinct(ScoreEntry.user_id))).where(ScoreEntry.score > score)
    ).one()
    return int(higher or 0) + 1


def entry_to_dict(entry: ScoreEntry, user: User) -> Dict[str, Any]:
    return {
        "id": str(entry.id),
        "userId": str(entry.user_id),
        "displayName": user.display_name,
        "score": entry.score,
        "maxTierReached": entry.max_tier_reached,
        "piecesMerged": entry.pieces_merged,
        "gameDurationSeconds": entry.game_duration_seconds,
        "createdAt": isoformat_utc(entry.created_at),
    }


__all__ = ["entry_to_dict", "placement_for", "record_score"]
