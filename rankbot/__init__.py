"""Discord bot that keeps a live, edited-in-place rankings leaderboard."""

__version__ = "1.0.0"
