"""Store readiness check, memoized for the life of the process."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..core.database import get_engine
from ..core.errors import configuration_error
from ..models import LEADERBOARD_VIEW_NAME
from .schema import REQUIRED_TABLES

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Database is unreachable. Check DATABASE_URL and that the server is running."
MISSING_SCHEMA_MESSAGE = (
    "Database relations {tables} not found. Provision the schema before serving scores."
)


class ReadinessGuard:
    """Verifies the store once, then trusts it until the process exits.

    ``verified`` starts False and flips to True on the first successful check.
    Nothing ever sets it back; a fresh process starts over.
    """

    def __init__(self, engine_factory: Callable[[], Engine] = get_engine) -> None:
        self._engine_factory = engine_factory
        self.verified = False

    def ensure_ready(self) -> Engine:
        engine = self._engine_factory()
        if self.verified:
            return engine

        try:
            inspector = inspect(engine)
            tables = set(inspector.get_table_names())
            views = set(inspector.get_view_names())
        except SQLAlchemyError as exc:
            logger.warning("Readiness check could not reach the database: %s", exc)
            raise configuration_error(UNREACHABLE_MESSAGE) from exc

        missing = [name for name in REQUIRED_TABLES if name not in tables]
        if LEADERBOARD_VIEW_NAME not in views:
            missing.append(LEADERBOARD_VIEW_NAME)
        if missing:
            logger.warning("Readiness check failed, missing relations: %s", ", ".join(missing))
            raise configuration_error(MISSING_SCHEMA_MESSAGE.format(tables=", ".join(missing)))

        self.verified = True
        logger.info("Database schema verified")
        return engine


_guard: Optional[ReadinessGuard] = None


def get_guard() -> ReadinessGuard:
    global _guard
    if _guard is None:
        _guard = ReadinessGuard()
    return _guard


def ensure_ready() -> Engine:
    """Return the engine once the store is known to be usable.

    Raises a CONFIGURATION :class:`ServiceError` when it is not.
    """

    return get_guard().ensure_ready()


__all__ = [
    "MISSING_SCHEMA_MESSAGE",
    "ReadinessGuard",
    "UNREACHABLE_MESSAGE",
    "ensure_ready",
    "get_guard",
]
