"""Daily stat request/response schemas.

Incoming dates accept "YYYY-MM-DD" or an ISO datetime and are normalized to
the UTC calendar day before they reach a repository.
"""
import datetime as dt

from pydantic import Field, field_validator

from ltc_tracker.db import DailyStat
from ltc_tracker.schemas.auth import CamelModel
from ltc_tracker.utils import parse_day, to_calendar_day


def _coerce_day(v: object) -> object:
    if isinstance(v, str):
        return parse_day(v)
    if isinstance(v, (dt.date, dt.datetime)):
        return to_calendar_day(v)
    return v


class DailyStatWrite(CamelModel):
    """Body for create and upsert: one account, one day, both amounts."""

    account_id: int
    date: dt.date
    earned: float = Field(ge=0)
    pending: float = Field(ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_day(cls, v: object) -> object:
        return _coerce_day(v)


class DailyStatUpdate(CamelModel):
    """Partial update of an existing stat.

    earned and pending are replaced together or not at all.
    """

    account_id: int | None = None
    date: dt.date | None = None
    earned: float | None = Field(default=None, ge=0)
    pending: float | None = Field(default=None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_day(cls, v: object) -> object:
        return _coerce_day(v)


class DailyStatOut(CamelModel):
    id: int
    account_id: int
    date: dt.date
    earned: float
    pending: float
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    @classmethod
    def from_stat(cls, stat: DailyStat) -> "DailyStatOut":
        return cls(
            id=stat.id,
            account_id=stat.account_id,
            date=stat.day,
            earned=stat.earned,
            pending=stat.pending,
            created_at=stat.created_at,
            updated_at=stat.updated_at,
        )


class DailyStatEnvelope(CamelModel):
    success: bool = True
    message: str
    data: DailyStatOut | None = None


class DailyTotal(CamelModel):
    """Per-day sum across all of a user's accounts."""

    date: dt.date
    earned: float
    pending: float
    total: float
    price: float | None = None
    total_usd: float | None = None


class AccountStatsOut(CamelModel):
    accounts_count: int
    days_count: int
    data: list[DailyTotal]
