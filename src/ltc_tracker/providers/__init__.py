"""Upstream data providers.

- BinancePriceProvider: LTC/USDT daily close prices (Binance klines)
- BlockCypherProvider: LTC address balances and transactions

Example:
    async with BinancePriceProvider() as prices:
        close = await prices.price_at(date(2025, 1, 1))
"""
from ltc_tracker.providers.binance import BinancePriceProvider
from ltc_tracker.providers.blockcypher import BlockCypherProvider
from ltc_tracker.providers.core import HTTPProviderABC, TTLCache, UpstreamErrorMapper

__all__ = [
    "BinancePriceProvider",
    "BlockCypherProvider",
    "HTTPProviderABC",
    "TTLCache",
    "UpstreamErrorMapper",
]
