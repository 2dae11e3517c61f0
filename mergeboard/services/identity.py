"""Player identity resolution.

Players are keyed by normalized email. Each call issues exactly one write: an
``INSERT .. ON CONFLICT (email) DO UPDATE`` for known emails, or a plain insert
of a fresh anonymous row. Uniqueness under concurrent submissions is left to
the database's unique constraint on ``users.email``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session

from ..core.errors import configuration_error
from ..core.time import utcnow
from ..models import User

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def normalize_email(value: Any) -> Optional[str]:
    """Trim and lowercase an email; non-strings and blanks become ``None``.

    The shape of the address is not checked here.
    """

    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    return normalized or None


def _dialect_insert(session: Session):
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_DIALECTS[dialect]
    except KeyError:
        raise configuration_error(
            f"Database dialect {dialect!r} is not supported. Use PostgreSQL or SQLite."
        ) from None


def upsert_by_email(session: Session, email: str, display_name: Optional[str]) -> User:
    """Insert or update the user owning ``email``.

    On conflict the incoming display name replaces the stored one when it is not
    ``None``; otherwise the stored name is kept. ``updated_at`` always advances.
    """

    now = utcnow()
    insert = _dialect_insert(session)
    statement = insert(User).values(
        id=uuid.uuid4(),
        email=email,
        display_name=display_name,
        created_at=now,
        updated_at=now,
    )
    statement = statement.on_conflict_do_update(
        index_elements=[User.email],
        set_={
            "display_name": func.coalesce(statement.excluded.display_name, User.display_name),
            "updated_at": now,
        },
    ).returning(User)

    user = session.scalars(
        statement, execution_options={"populate_existing": True}
    ).one()
    logger.debug("Upserted user %s", user.id)
    return user


def create_anonymous(session: Session, display_name: Optional[str]) -> User:
    """Create a new email-less user with its own unique ``anon_key``."""

    user = User(anon_key=uuid.uuid4().hex, display_name=display_name)
    session.add(user)
    session.flush()
    logger.debug("Created anonymous user %s", user.id)
    return user


def resolve_user(session: Session, nickname: Optional[str], email: Optional[str]) -> User:
    """Return the user a submission belongs to.

    ``email`` must already be normalized. The caller owns the transaction.
    """

    if email:
        return upsert_by_email(session, email, nickname)
    return create_anonymous(session, nickname)


__all__ = [
    "create_anonymous",
    "normalize_email",
    "resolve_user",
    "upsert_by_email",
]
