"""Employee directory administration and leaderboard statistics."""

__version__ = "0.3.0"
