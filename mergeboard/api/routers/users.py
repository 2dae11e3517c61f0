"""Contact-info endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core.errors import unexpected_error, validation_error
from ...services.decency import validate_nickname
from ...services.identity import normalize_email, upsert_by_email
from ...services.readiness import ensure_ready
from ...services.validation import USER_FIELDS, Invalid, validate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.post("/users")
def upsert_user(response: Response, body: Any = Body(default=None)) -> Dict[str, Any]:
    """Attach an email (and optionally a display name) to a player."""

    response.headers["Cache-Control"] = "no-store"

    result = validate(body, USER_FIELDS)
    if isinstance(result, Invalid):
        raise validation_error(result.message)
    payload = result.values

    display_name = payload["displayName"]
    if display_name is not None:
        is_valid, problem = validate_nickname(display_name)
        if not is_valid:
            raise validation_error(problem)

    email = normalize_email(payload["email"])
    if not email:
        raise validation_error("Email is required")

    engine = ensure_ready()

    try:
        with Session(engine) as session:
            user = upsert_by_email(session, email, display_name)
            session.commit()
            return {"id": str(user.id), "email": email, "displayName": user.display_name}
    except SQLAlchemyError as exc:
        logger.exception("Failed to store user contact info")
        raise unexpected_error("Failed to store user contact info") from exc


__all__ = ["router"]
