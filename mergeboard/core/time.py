"""Time helpers shared by models and serializers."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime | None) -> str | None:
    """Render a timestamp as ISO-8601 with a trailing ``Z``.

    SQLite hands timestamps back naive; those are taken to already be UTC.
    """

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


__all__ = ["isoformat_utc", "utcnow"]
