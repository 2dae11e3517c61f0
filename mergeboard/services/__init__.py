"""Service layer helpers."""

from .decency import is_offensive, validate_nickname
from .identity import normalize_email, resolve_user
from .leaderboard import clamp_limit, rank_page, top_entries
from .readiness import ReadinessGuard, ensure_ready
from .schema import provision_schema
from .scores import entry_to_dict, placement_for, record_score
from .validation import SCORE_FIELDS, USER_FIELDS, Invalid, Valid, validate
from .weeks import iso_week_id, normalize_iso_week_param

__all__ = [
    "Invalid",
    "ReadinessGuard",
    "SCORE_FIELDS",
    "USER_FIELDS",
    "Valid",
    "clamp_limit",
    "ensure_ready",
    "entry_to_dict",
    "is_offensive",
    "iso_week_id",
    "normalize_email",
    "normalize_iso_week_param",
    "placement_for",
    "provision_schema",
    "rank_page",
    "record_score",
    "resolve_user",
    "top_entries",
    "validate",
    "validate_nickname",
]
