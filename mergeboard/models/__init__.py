"""Database model exports."""

from .leaderboard import LEADERBOARD_VIEW_NAME, LeaderboardRow, leaderboard_view
from .score import ScoreEntry
from .user import User

__all__ = [
    "LEADERBOARD_VIEW_NAME",
    "LeaderboardRow",
    "ScoreEntry",
    "User",
    "leaderboard_view",
]
