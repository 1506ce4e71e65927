"""HTTP routers.

Includes routes for:
- /login, /logout, /signup, /api/user/* - sessions and profile
- /api/accounts - account CRUD, verification and transactions
- /api/daily-stats, /api/account-stats - per-day earnings and aggregates
- /, /dashboard, /stats, /input-stats, /accounts/{id} - browsable pages
"""
from ltc_tracker.routers.accounts import router as accounts_router
from ltc_tracker.routers.auth import router as auth_router
from ltc_tracker.routers.daily_stats import router as daily_stats_router
from ltc_tracker.routers.pages import router as pages_router

__all__ = [
    "accounts_router",
    "auth_router",
    "daily_stats_router",
    "pages_router",
]
