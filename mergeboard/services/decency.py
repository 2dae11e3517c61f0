"""Nickname profanity filter with leetspeak normalization."""

from __future__ import annotations

import re
from typing import Optional, Tuple

BLOCKED_WORDS = (
    "fuck", "shit", "ass", "bitch", "cunt", "dick", "cock", "pussy",
    "nigger", "nigga", "faggot", "fag", "retard", "slut", "whore",
    "bastard", "damn", "piss", "crap", "penis", "vagina", "anus",
    "nazi", "hitler", "rape", "molest", "pedo", "porn", "sex",
    "twat", "wank", "tits", "boob", "dildo", "jizz", "cum", "semen",
    "kike", "spic", "chink", "gook", "wetback", "beaner",
)

LEET_MAP = {
    "@": "a",
    "4": "a",
    "8": "b",
    "3": "e",
    "1": "i",
    "!": "i",
    "|": "i",
    "0": "o",
    "5": "s",
    "$": "s",
    "7": "t",
    "+": "t",
    "2": "z",
}

NICKNAME_REJECTED_MESSAGE = "Please choose a different nickname."

_LEET_TABLE = str.maketrans(LEET_MAP)
_REPEATS = re.compile(r"(.)\1+")
_NON_LETTERS = re.compile(r"[^a-z]")

# Words with a doubled letter would never survive repeat collapsing.
_DOUBLED_LETTER_WORDS = tuple(word for word in BLOCKED_WORDS if _REPEATS.search(word))
_SINGLE_LETTER_WORDS = tuple(word for word in BLOCKED_WORDS if not _REPEATS.search(word))


def _fold(text: str) -> str:
    return text.lower().translate(_LEET_TABLE)


def normalize_text(text: str) -> str:
    """Fold ``text`` to the letters-only form the blocklist is matched against."""

    normalized = _fold(text)
    # "fuuuck" -> "fuck"
    normalized = _REPEATS.sub(r"\1", normalized)
    return _NON_LETTERS.sub("", normalized)


def is_offensive(text: str) -> bool:
    collapsed = normalize_text(text)
    if any(word in collapsed for word in _SINGLE_LETTER_WORDS):
        return True
    letters = _NON_LETTERS.sub("", _fold(text))
    return any(word in letters for word in _DOUBLED_LETTER_WORDS)


def validate_nickname(nickname: str) -> Tuple[bool, Optional[str]]:
    """Return ``(is_valid, error_message)`` for a display label."""

    if is_offensive(nickname):
        return False, NICKNAME_REJECTED_MESSAGE
    return True, None


__all__ = [
    "BLOCKED_WORDS",
    "LEET_MAP",
    "NICKNAME_REJECTED_MESSAGE",
    "is_offensive",
    "normalize_text",
    "validate_nickname",
]
