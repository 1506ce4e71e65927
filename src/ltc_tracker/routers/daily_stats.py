"""Daily stat routes and the per-day aggregate (reject mode)."""
import logging

from fastapi import APIRouter, Query, status
from starlette.concurrency import run_in_threadpool

from ltc_tracker.deps import ApiIdentity, DailyStats, Prices
from ltc_tracker.providers.core import round2
from ltc_tracker.routers.params import ERROR_RESPONSES, parse_day_param
from ltc_tracker.schemas import (AccountStatsOut, DailyStatEnvelope,
                                 DailyStatOut, DailyStatUpdate, DailyStatWrite,
                                 DailyTotal)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["daily-stats"], responses=ERROR_RESPONSES)


@router.get("/daily-stats", response_model=list[DailyStatOut])
def list_daily_stats(
    identity: ApiIdentity,
    stats: DailyStats,
    account_id: int | None = Query(default=None, alias="accountId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
) -> list[DailyStatOut]:
    """The caller's stats, newest day first; ``accountId`` narrows to one account."""
    rows = stats.list_stats(
        identity,
        account_id=account_id,
        start=parse_day_param(start_date, "startDate"),
        end=parse_day_param(end_date, "endDate"),
    )
    return [DailyStatOut.from_stat(s) for s in rows]


@router.post(
    "/daily-stats",
    response_model=DailyStatEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_daily_stat(
    body: DailyStatWrite,
    identity: ApiIdentity,
    stats: DailyStats,
) -> DailyStatEnvelope:
    """Create a stat; 409 if the account already has one for that day."""
    stat = stats.create(identity, body.account_id, body.date, body.earned, body.pending)
    return DailyStatEnvelope(
        message="Daily stat created successfully",
        data=DailyStatOut.from_stat(stat),
    )


@router.put("/daily-stats", response_model=DailyStatEnvelope)
def upsert_daily_stat(
    body: DailyStatWrite,
    identity: ApiIdentity,
    stats: DailyStats,
) -> DailyStatEnvelope:
    """Create or overwrite the stat for (accountId, date). Idempotent."""
    stat = stats.upsert(identity, body.account_id, body.date, body.earned, body.pending)
    return DailyStatEnvelope(message="Stat upserted", data=DailyStatOut.from_stat(stat))


@router.put("/daily-stats/{stat_id}", response_model=DailyStatEnvelope)
def update_daily_stat(
    stat_id: int,
    body: DailyStatUpdate,
    identity: ApiIdentity,
    stats: DailyStats,
) -> DailyStatEnvelope:
    stat = stats.update(
        identity,
        stat_id,
        account_id=body.account_id,
        day=body.date,
        earned=body.earned,
        pending=body.pending,
    )
    return DailyStatEnvelope(
        message="Daily stat updated successfully",
        data=DailyStatOut.from_stat(stat),
    )


@router.delete("/daily-stats/{stat_id}", response_model=DailyStatEnvelope)
def delete_daily_stat(stat_id: int, identity: ApiIdentity, stats: DailyStats) -> DailyStatEnvelope:
    stats.delete(identity, stat_id)
    return DailyStatEnvelope(message="Daily stat deleted successfully")


@router.get("/account-stats", response_model=AccountStatsOut)
async def get_account_stats(
    identity: ApiIdentity,
    stats: DailyStats,
    prices: Prices,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    include_prices: bool = Query(default=False, alias="includePrices"),
) -> AccountStatsOut:
    """Per-day earned/pending totals across all of the caller's accounts.

    Args:
        start_date: First day to include (YYYY-MM-DD), optional.
        end_date: Last day to include (YYYY-MM-DD), optional.
        include_prices: Attach the LTC/USDT close price and USD total per day.
    """
    start = parse_day_param(start_date, "startDate")
    end = parse_day_param(end_date, "endDate")
    aggregate = await run_in_threadpool(stats.aggregate, identity, start, end)

    price_by_day: dict = {}
    if include_prices and aggregate.days:
        price_by_day = await prices.prices_for([d.day for d in aggregate.days])

    data = []
    for totals in aggregate.days:
        price = price_by_day.get(totals.day)
        data.append(
            DailyTotal(
                date=totals.day,
                earned=totals.earned,
                pending=totals.pending,
                total=totals.total,
                price=price,
                total_usd=round2(totals.total * price) if price is not None else None,
            )
        )
    return AccountStatsOut(
        accounts_count=aggregate.accounts_count,
        days_count=len(data),
        data=data,
    )
