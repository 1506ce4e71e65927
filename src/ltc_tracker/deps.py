"""FastAPI dependency injection: app.state.container holds singletons; Depends() resolves them.

Two enforcement modes for the identity attached by the auth gateway:
- PageIdentity: browsable routes; anonymous callers are redirected to /login.
- ApiIdentity: programmatic routes; anonymous callers get 401.
"""
from typing import Annotated

from fastapi import Depends, Request

from ltc_tracker.container import Container
from ltc_tracker.errors import LoginRequired, NotAuthenticated
from ltc_tracker.providers import BinancePriceProvider, BlockCypherProvider
from ltc_tracker.schemas import Identity
from ltc_tracker.security import SessionStore
from ltc_tracker.services import (AccountRepository, DailyStatRepository,
                                  IdentityStore)


def _container(request: Request) -> Container:
    return request.app.state.container


def get_identity(request: Request) -> Identity | None:
    """Identity resolved by the auth gateway, or None."""
    return getattr(request.state, "identity", None)


def require_api_identity(request: Request) -> Identity:
    """Reject mode: 401 when no session is attached."""
    identity = get_identity(request)
    if identity is None:
        raise NotAuthenticated()
    return identity


def require_page_identity(request: Request) -> Identity:
    """Redirect mode: anonymous callers are sent to the login page."""
    identity = get_identity(request)
    if identity is None:
        raise LoginRequired()
    return identity


def get_session_store(request: Request) -> SessionStore:
    return _container(request).session_store()


def get_identities(request: Request) -> IdentityStore:
    return _container(request).identities()


def get_accounts(request: Request) -> AccountRepository:
    return _container(request).accounts()


def get_daily_stats(request: Request) -> DailyStatRepository:
    return _container(request).daily_stats()


def get_price_provider(request: Request) -> BinancePriceProvider:
    return _container(request).price_provider()


def get_address_provider(request: Request) -> BlockCypherProvider:
    return _container(request).address_provider()


# Type aliases for route injection
OptionalIdentity = Annotated[Identity | None, Depends(get_identity)]
ApiIdentity = Annotated[Identity, Depends(require_api_identity)]
PageIdentity = Annotated[Identity, Depends(require_page_identity)]
Sessions = Annotated[SessionStore, Depends(get_session_store)]
Identities = Annotated[IdentityStore, Depends(get_identities)]
Accounts = Annotated[AccountRepository, Depends(get_accounts)]
DailyStats = Annotated[DailyStatRepository, Depends(get_daily_stats)]
Prices = Annotated[BinancePriceProvider, Depends(get_price_provider)]
Addresses = Annotated[BlockCypherProvider, Depends(get_address_provider)]
