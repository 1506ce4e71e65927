"""DI container. Built by create_app(); routes resolve providers via deps.py."""
from dataclasses import asdict

from dependency_injector import containers, providers

from ltc_tracker.config import Settings
from ltc_tracker.db import Database
from ltc_tracker.providers import BinancePriceProvider, BlockCypherProvider
from ltc_tracker.security import OwnershipGuard, PasswordHasher, SessionStore
from ltc_tracker.services import (AccountRepository, DailyStatRepository,
                                  IdentityStore)


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    database = providers.Singleton(
        Database,
        config.database_url,
        echo=config.sql_echo,
    )

    hasher = providers.Singleton(PasswordHasher)
    guard = providers.Singleton(OwnershipGuard, admin_can_read=config.admin_can_read)

    session_store = providers.Singleton(SessionStore, database, ttl=config.session_ttl)
    identities = providers.Singleton(IdentityStore, database, hasher)
    accounts = providers.Singleton(AccountRepository, database, guard)
    daily_stats = providers.Singleton(DailyStatRepository, database, guard)

    price_provider = providers.Singleton(
        BinancePriceProvider,
        config.binance_base_url,
        cache_ttl=config.price_cache_ttl,
        timeout=config.http_timeout,
    )
    address_provider = providers.Singleton(
        BlockCypherProvider,
        config.blockcypher_base_url,
        timeout=config.http_timeout,
    )


def init_container(settings: Settings) -> Container:
    """Create a container configured from ``settings``."""
    container = Container()
    container.config.from_dict(asdict(settings))
    return container
