"""Declarative payload validation.

A payload is checked against a table of :class:`FieldSpec` rows. Each value is
first coerced (strings trimmed, numeric strings parsed) and then bounds-checked.
The result is either :class:`Valid` with the cleaned values or :class:`Invalid`
naming the first field that failed, in table order.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

EMAIL_MAX_LENGTH = 254
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class FieldType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    EMAIL = "email"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: FieldType
    label: str
    required: bool = True
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    messages: Optional[Mapping[str, str]] = None

    def message(self, key: str, default: str) -> str:
        if self.messages and key in self.messages:
            return self.messages[key]
        return default


@dataclass(frozen=True)
class Valid:
    values: Dict[str, Any]

    ok = True


@dataclass(frozen=True)
class Invalid:
    field: str
    message: str

    ok = False


ValidationResult = Union[Valid, Invalid]


def trim_string(value: Any) -> Any:
    """Trim strings; leave everything else alone."""

    if isinstance(value, str):
        return value.strip()
    return value


def blank_to_missing(value: Any) -> Any:
    """Treat ``None`` and blank strings as absent."""

    if value is None:
        return MISSING
    if isinstance(value, str) and not value.strip():
        return MISSING
    return value


def coerce_number(value: Any) -> Any:
    """Parse numeric-looking strings into numbers.

    Non-numeric strings come back unchanged so the type check can reject them.
    """

    if not isinstance(value, str):
        return value
    candidate = value.strip()
    try:
        number = float(candidate)
    except ValueError:
        return value
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def is_email_shape(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value))


def _check_string(spec: FieldSpec, value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return spec.message("type", f"{spec.label} must be a string")
    if spec.min_length is not None and len(value) < spec.min_length:
        return spec.message(
            "min_length", f"{spec.label} must be at least {spec.min_length} characters"
        )
    if spec.max_length is not None and len(value) > spec.max_length:
        return spec.message(
            "max_length", f"{spec.label} must be {spec.max_length} characters or fewer"
        )
    return None


def _check_email(spec: FieldSpec, value: Any) -> Optional[str]:
    if not isinstance(value, str) or not is_email_shape(value):
        return spec.message("email", f"{spec.label} must be valid")
    return _check_string(spec, value)


def _check_integer(spec: FieldSpec, value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return spec.message("type", f"{spec.label} must be a number")
    if not _is_integer(value):
        return spec.message("integer", f"{spec.label} must be an integer")
    if spec.minimum is not None and value < spec.minimum:
        return spec.message("minimum", f"{spec.label} must be at least {spec.minimum}")
    if spec.maximum is not None and value > spec.maximum:
        return spec.message("maximum", f"{spec.label} must be at most {spec.maximum}")
    return None


_CHECKS = {
    FieldType.STRING: _check_string,
    FieldType.EMAIL: _check_email,
    FieldType.INTEGER: _check_integer,
}


def _coerce(spec: FieldSpec, raw: Any) -> Any:
    if spec.type is FieldType.INTEGER:
        return blank_to_missing(coerce_number(raw))
    if spec.type is FieldType.EMAIL:
        return blank_to_missing(trim_string(raw))
    # Plain strings keep an empty value so that a length check reports it.
    value = trim_string(raw)
    return MISSING if value is None else value


def validate(payload: Any, fields: Sequence[FieldSpec]) -> ValidationResult:
    """Check ``payload`` against ``fields`` and return the first violation."""

    if not isinstance(payload, Mapping):
        return Invalid(field="", message="Request body must be a JSON object")

    values: Dict[str, Any] = {}
    for spec in fields:
        value = _coerce(spec, payload.get(spec.name, MISSING))
        if value is MISSING:
            if spec.required:
                return Invalid(spec.name, spec.message("required", f"{spec.label} is required"))
            values[spec.name] = None
            continue

        problem = _CHECKS[spec.type](spec, value)
        if problem:
            return Invalid(spec.name, problem)
        values[spec.name] = int(value) if spec.type is FieldType.INTEGER else value
    return Valid(values)


SCORE_FIELDS = (
    FieldSpec(
        "nickname",
        FieldType.STRING,
        "Nickname",
        min_length=2,
        max_length=24,
    ),
    FieldSpec(
        "score",
        FieldType.INTEGER,
        "Score",
        minimum=0,
        maximum=1_000_000_000,
        messages={
            "minimum": "Score cannot be negative",
            "maximum": "Score is unreasonably large",
        },
    ),
    FieldSpec(
        "email",
        FieldType.EMAIL,
        "Email",
        required=False,
        max_length=EMAIL_MAX_LENGTH,
    ),
    FieldSpec("maxTierReached", FieldType.INTEGER, "Max tier reached", required=False, minimum=1, maximum=11),
    FieldSpec("piecesMerged", FieldType.INTEGER, "Pieces merged", required=False, minimum=0),
    FieldSpec("gameDurationSeconds", FieldType.INTEGER, "Game duration", required=False, minimum=0),
)

USER_FIELDS = (
    FieldSpec("email", FieldType.EMAIL, "Email", max_length=EMAIL_MAX_LENGTH),
    FieldSpec(
        "displayName",
        FieldType.STRING,
        "Display name",
        required=False,
        min_length=2,
        max_length=24,
    ),
)


__all__ = [
    "EMAIL_MAX_LENGTH",
    "FieldSpec",
    "FieldType",
    "Invalid",
    "MISSING",
    "SCORE_FIELDS",
    "USER_FIELDS",
    "Valid",
    "ValidationResult",
    "blank_to_missing",
    "coerce_number",
    "is_email_shape",
    "trim_string",
    "validate",
]
