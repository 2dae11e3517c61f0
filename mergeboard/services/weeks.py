"""ISO week keys for callers that bucket scores by week."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional, Sequence, Union

ISO_WEEK_PATTERN = re.compile(r"\d{4}-W\d{2}")


def iso_week_id(moment: Union[date, datetime, None] = None) -> str:
    """Return the ``YYYY-Www`` key for ``moment`` (UTC now by default).

    The year is the ISO week-numbering year, so 2024-12-30 is ``2025-W01``.
    """

    if moment is None:
        moment = datetime.now(timezone.utc)
    if isinstance(moment, datetime) and moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    year, week, _ = moment.isocalendar()
    return f"{year}-W{week:02d}"


def normalize_iso_week_param(value: Union[str, Sequence[str], None]) -> Optional[str]:
    """Return the first query value if it looks like a week key, else ``None``."""

    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not value or not isinstance(value, str):
        return None
    return value if ISO_WEEK_PATTERN.fullmatch(value) else None


__all__ = [
    "ISO_WEEK_PATTERN",
    "iso_week_id",
    "normalize_iso_week_param",
]
