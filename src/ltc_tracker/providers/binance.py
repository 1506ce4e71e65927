"""LTC/USDT daily close prices from Binance klines."""
import logging
from datetime import UTC, date, datetime, time, timedelta

import httpx
from pydantic import BaseModel

from ltc_tracker.providers.core import HTTPProviderABC, TTLCache

logger = logging.getLogger(__name__)


class KlinesParams(BaseModel):
    """Params for /klines: one daily candle starting at ``startTime`` (ms)."""

    symbol: str = "LTCUSDT"
    interval: str = "1d"
    startTime: int
    limit: int = 1


def day_start_ms(day: date) -> int:
    """Milliseconds since the epoch at 00:00 UTC of ``day``."""
    return int(datetime.combine(day, time.min, tzinfo=UTC).timestamp() * 1000)


class BinancePriceProvider(HTTPProviderABC):
    """price_at(day) -> close price or None, memoized in a TTLCache.

    Upstream failures are logged and reported as "no price"; HTTP error
    responses and empty candle lists are cached as misses, transport
    errors are not.
    """

    BASE_URL = "https://api.binance.com/api/v3"
    SYMBOL = "LTCUSDT"

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        cache: TTLCache | None = None,
        cache_ttl: timedelta = timedelta(hours=24),
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, client=client)
        self._cache = cache if cache is not None else TTLCache(cache_ttl)

    @classmethod
    def cache_key(cls, day: date) -> str:
        return f"{cls.SYMBOL.lower()}-{day.isoformat()}"

    async def price_at(self, day: date) -> float | None:
        """Close price of LTC/USDT for the UTC day, or None when unknown."""
        key = self.cache_key(day)
        hit, cached = self._cache.lookup(key)
        if hit:
            return cached

        params = KlinesParams(symbol=self.SYMBOL, startTime=day_start_ms(day))
        try:
            response = await self._client.get("/klines", params=params.model_dump())
        except httpx.HTTPError as exc:
            logger.warning("Binance price lookup for %s failed: %s", day, exc)
            return None

        if response.is_error:
            logger.warning(
                "Binance returned %s for %s", response.status_code, day
            )
            self._cache.set(key, None)
            return None

        price = self._close_price(response.json())
        self._cache.set(key, price)
        return price

    async def prices_for(self, days: list[date]) -> dict[date, float | None]:
        """Look up several days; duplicate days are fetched once."""
        return {day: await self.price_at(day) for day in dict.fromkeys(days)}

    @staticmethod
    def _close_price(data: object) -> float | None:
        # Kline row: [open_time, open, high, low, close, volume, ...]
        if not isinstance(data, list) or not data:
            return None
        try:
            return float(data[0][4])
        except (IndexError, TypeError, ValueError):
            logger.warning("Unexpected kline payload from Binance: %r", data[:1])
            return None
