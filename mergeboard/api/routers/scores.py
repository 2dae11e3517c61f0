"""Score submission endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.errors import unexpected_error, validation_error
from ...services.decency import validate_nickname
from ...services.identity import normalize_email, resolve_user
from ...services.readiness import ensure_ready
from ...services.scores import entry_to_dict, placement_for, record_score
from ...services.validation import SCORE_FIELDS, Invalid, validate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scores"])


@router.post("/scores", status_code=201)
def submit_score(response: Response, body: Any = Body(default=None)) -> Dict[str, Any]:
    """Store a finished game and report where it places.

    Everything before the insert is side-effect free, so a rejected payload
    never leaves a user or score row behind.
    """

    response.headers["Cache-Control"] = "no-store"

    result = validate(body, SCORE_FIELDS)
    if isinstance(result, Invalid):
        raise validation_error(result.message)
    payload = result.values

    nickname = payload["nickname"]
    is_valid, problem = validate_nickname(nickname)
    if not is_valid:
        raise validation_error(problem)

    engine = ensure_ready()

    try:
        with Session(engine) as session:
            user = resolve_user(session, nickname, normalize_email(payload["email"]))
            entry = record_score(
                session,
                user.id,
                payload["score"],
                max_tier_reached=payload["maxTierReached"],
                pieces_merged=payload["piecesMerged"],
                game_duration_seconds=payload["gameDurationSeconds"],
            )
            session.commit()
            session.refresh(entry)
            session.refresh(user)

            # Separate read after the commit: a snapshot, not a locked rank.
            placement = placement_for(session, entry.score)
            return {"placement": placement, "entry": entry_to_dict(entry, user)}
    except SQLAlchemyError as exc:
        logger.exception("Failed to store score")
        raise unexpected_error("Failed to store score") from exc


__all__ = ["router"]
