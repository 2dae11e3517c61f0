"""Score submission and leaderboard service for the merge game."""

__version__ = "1.0.0"
