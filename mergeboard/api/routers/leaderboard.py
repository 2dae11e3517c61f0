"""Leaderboard endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.config import LEADERBOARD_CACHE_SECONDS
from ...core.errors import unexpected_error
from ...services.leaderboard import clamp_limit, rank_page, top_entries
from ...services.readiness import ensure_ready

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leaderboard"])

CACHE_CONTROL = f"public, max-age={LEADERBOARD_CACHE_SECONDS}, s-maxage={LEADERBOARD_CACHE_SECONDS}"


@router.get("/leaderboard")
def get_leaderboard(
    response: Response, limit: Optional[str] = Query(default=None)
) -> Dict[str, Any]:
    """Top scores, highest first, ranked by position within the page."""

    # Bad limits fall back to the default instead of failing the request.
    page_size = clamp_limit(limit)

    engine = ensure_ready()

    try:
        with Session(engine) as session:
            rows = top_entries(session, page_size)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch leaderboard")
        raise unexpected_error("Failed to fetch leaderboard") from exc

    response.headers["Cache-Control"] = CACHE_CONTROL
    return {"entries": rank_page(rows)}


__all__ = ["router"]
