"""API route modules."""
from contest_api.routes import auth, contests, leaderboard, users

__all__ = ["auth", "contests", "leaderboard", "users"]
