"""Service layer: identity store and owner-scoped resource repositories."""
from ltc_tracker.services.accounts import AccountRepository
from ltc_tracker.services.daily_stats import (Aggregate, DailyStatRepository,
                                              DayTotals)
from ltc_tracker.services.identity import IdentityStore

__all__ = [
    "AccountRepository",
    "Aggregate",
    "DailyStatRepository",
    "DayTotals",
    "IdentityStore",
]
