"""CLI entry points for database maintenance."""
import logging

from ltc_tracker.config import Settings
from ltc_tracker.container import init_container


def init_db() -> None:
    """Create all tables in DATABASE_URL."""
    logging.basicConfig(level=logging.INFO)
    container = init_container(Settings.from_env())
    container.database().init()


def reap_sessions() -> None:
    """Delete expired sessions once; suitable for a cron job."""
    logging.basicConfig(level=logging.INFO)
    container = init_container(Settings.from_env())
    removed = container.session_store().purge_expired()
    print(f"Removed {removed} expired session(s)")
