"""Database engine and session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from .config import DATABASE_URL, DB_ECHO
from .errors import configuration_error

MISSING_DATABASE_MESSAGE = (
    "Database connection env vars are missing. Set DATABASE_URL and restart the server."
)

_engine: Optional[Engine] = None


def build_engine(url: str, *, echo: bool = DB_ECHO) -> Engine:
    """Create an engine with the connect arguments the dialect needs."""

    kwargs: Dict[str, Any] = {"echo": echo}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **kwargs)


def get_engine() -> Engine:
    """Return the process engine, creating it from ``DATABASE_URL`` on first use."""

    global _engine
    if _engine is None:
        if not DATABASE_URL:
            raise configuration_error(MISSING_DATABASE_MESSAGE)
        _engine = build_engine(DATABASE_URL)
    return _engine


def use_engine(engine: Optional[Engine]) -> None:
    """Install an explicit engine (or clear it so the next use rebuilds)."""

    global _engine
    _engine = engine


__all__ = [
    "MISSING_DATABASE_MESSAGE",
    "build_engine",
    "get_engine",
    "use_engine",
]
