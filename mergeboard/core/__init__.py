"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_AUTO_PROVISION,
    LEADERBOARD_CACHE_SECONDS,
    LEADERBOARD_DEFAULT_LIMIT,
    LEADERBOARD_MAX_LIMIT,
)
from .database import build_engine, get_engine, use_engine
from .errors import ErrorKind, ServiceError
from .log import configure_logging
from .time import isoformat_utc, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_AUTO_PROVISION",
    "LEADERBOARD_CACHE_SECONDS",
    "LEADERBOARD_DEFAULT_LIMIT",
    "LEADERBOARD_MAX_LIMIT",
    "ErrorKind",
    "ServiceError",
    "build_engine",
    "configure_logging",
    "get_engine",
    "isoformat_utc",
    "use_engine",
    "utcnow",
]
