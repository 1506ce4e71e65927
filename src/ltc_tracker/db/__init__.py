"""Database package: models and session management."""
from ltc_tracker.db.models import Account, AuthSession, DailyStat, Role, User
from ltc_tracker.db.sessions import Database

__all__ = ["Account", "AuthSession", "DailyStat", "Database", "Role", "User"]
