"""DailyStat repository: per-account, per-day earnings.

At most one row exists per (account_id, day). create() treats an existing
row as a Conflict; upsert() overwrites it. The upsert is a single
``INSERT ... ON CONFLICT DO UPDATE`` on PostgreSQL and SQLite, so two
concurrent writers for the same key end with one row carrying the last
writer's amounts.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ltc_tracker.db import Account, Database, DailyStat
from ltc_tracker.errors import Conflict, MalformedInput
from ltc_tracker.schemas.auth import Identity
from ltc_tracker.security.ownership import Action, OwnershipGuard
from ltc_tracker.utils import to_calendar_day, utcnow

logger = logging.getLogger(__name__)

_DUPLICATE = "Daily stat already exists for this account on this date"

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE.
_UPSERT_INSERTS: dict[str, Callable] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(frozen=True)
class DayTotals:
    """Sum of earned/pending over one calendar day."""

    day: date
    earned: float
    pending: float

    @property
    def total(self) -> float:
        return self.earned + self.pending


@dataclass(frozen=True)
class Aggregate:
    accounts_count: int
    days: list[DayTotals]


def _check_range(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and start > end:
        raise MalformedInput("startDate must not be after endDate")


class DailyStatRepository:
    """Stats reachable through the caller's accounts."""

    def __init__(self, database: Database, guard: OwnershipGuard) -> None:
        self._db = database
        self._guard = guard

    def _find(self, db: Session, account_id: int, day: date) -> DailyStat | None:
        return db.exec(
            select(DailyStat).where(
                DailyStat.account_id == account_id, DailyStat.day == day
            )
        ).first()

    def list_stats(
        self,
        identity: Identity,
        *,
        account_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[DailyStat]:
        """The caller's stats, newest day first, optionally for one account."""
        _check_range(start, end)
        with self._db.session() as db:
            query = select(DailyStat)
            if account_id is not None:
                account = self._guard.account_for(db, identity, account_id, Action.READ)
                query = query.where(DailyStat.account_id == account.id)
            else:
                query = query.where(DailyStat.user_id == identity.id)
            if start is not None:
                query = query.where(DailyStat.day >= start)
            if end is not None:
                query = query.where(DailyStat.day <= end)
            query = query.order_by(col(DailyStat.day).desc(), col(DailyStat.account_id))
            return list(db.exec(query).all())

    def create(
        self,
        identity: Identity,
        account_id: int,
        day: date,
        earned: float,
        pending: float,
    ) -> DailyStat:
        """Insert a new stat; an existing row for the same day is a Conflict."""
        day = to_calendar_day(day)
        try:
            with self._db.session() as db:
                account = self._guard.account_for(db, identity, account_id)
                if self._find(db, account.id, day) is not None:
                    raise Conflict(_DUPLICATE)
                stat = DailyStat(
                    account_id=account.id,
                    user_id=account.user_id,
                    day=day,
                    earned=earned,
                    pending=pending,
                )
                db.add(stat)
                db.flush()
        except IntegrityError as exc:
            raise Conflict(_DUPLICATE) from exc
        return stat

    def upsert(
        self,
        identity: Identity,
        account_id: int,
        day: date,
        earned: float,
        pending: float,
    ) -> DailyStat:
        """Insert the stat for (account, day) or overwrite its amounts.

        The update branch stamps updated_at and leaves created_at alone.
        """
        day = to_calendar_day(day)
        now = utcnow()
        with self._db.session() as db:
            account = self._guard.account_for(db, identity, account_id)
            insert = _UPSERT_INSERTS.get(self._db.dialect)
            if insert is not None:
                stmt = insert(DailyStat).values(
                    account_id=account.id,
                    user_id=account.user_id,
                    day=day,
                    earned=earned,
                    pending=pending,
                    created_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["account_id", "day"],
                    set_={
                        "earned": stmt.excluded.earned,
                        "pending": stmt.excluded.pending,
                        "updated_at": now,
                    },
                )
                db.exec(stmt)
            else:
                self._upsert_with_savepoint(db, account, day, earned, pending, now)
            stat = self._find(db, account.id, day)
            db.refresh(stat)
        logger.debug("Upserted stat account_id=%s day=%s", account_id, day)
        return stat

    def _upsert_with_savepoint(
        self,
        db: Session,
        account: Account,
        day: date,
        earned: float,
        pending: float,
        now: datetime,
    ) -> None:
        """Portable fallback: insert, and on a lost race update the winner's row."""
        existing = self._find(db, account.id, day)
        if existing is None:
            try:
                with db.begin_nested():
                    db.add(
                        DailyStat(
                            account_id=account.id,
                            user_id=account.user_id,
                            day=day,
                            earned=earned,
                            pending=pending,
                            created_at=now,
                        )
                    )
                return
            except IntegrityError:
                existing = self._find(db, account.id, day)
        existing.earned = earned
        existing.pending = pending
        existing.updated_at = now
        db.add(existing)
        db.flush()

    def update(
        self,
        identity: Identity,
        stat_id: int,
        *,
        account_id: int | None = None,
        day: date | None = None,
        earned: float | None = None,
        pending: float | None = None,
    ) -> DailyStat:
        """Edit a stat, optionally moving it to another owned account or day."""
        if (earned is None) != (pending is None):
            raise MalformedInput("earned and pending must be provided together")
        try:
            with self._db.session() as db:
                stat, account = self._guard.daily_stat_for(db, identity, stat_id)
                if account_id is not None and account_id != stat.account_id:
                    account = self._guard.account_for(db, identity, account_id)
                target_day = to_calendar_day(day) if day is not None else stat.day
                duplicate = db.exec(
                    select(DailyStat).where(
                        DailyStat.account_id == account.id,
                        DailyStat.day == target_day,
                        DailyStat.id != stat.id,
                    )
                ).first()
                if duplicate is not None:
                    raise Conflict(_DUPLICATE)
                stat.account_id = account.id
                stat.user_id = account.user_id
                stat.day = target_day
                if earned is not None:
                    stat.earned = earned
                    stat.pending = pending
                stat.updated_at = utcnow()
                db.add(stat)
                db.flush()
        except IntegrityError as exc:
            raise Conflict(_DUPLICATE) from exc
        return stat

    def delete(self, identity: Identity, stat_id: int) -> None:
        with self._db.session() as db:
            stat, _ = self._guard.daily_stat_for(db, identity, stat_id)
            db.delete(stat)

    def aggregate(
        self,
        identity: Identity,
        start: date | None = None,
        end: date | None = None,
    ) -> Aggregate:
        """Per-day earned/pending sums across all of the caller's accounts.

        The range is inclusive on both ends; either bound may be omitted.
        """
        _check_range(start, end)
        with self._db.session() as db:
            accounts_count = db.exec(
                select(func.count()).select_from(Account).where(Account.user_id == identity.id)
            ).one()
            query = (
                select(
                    DailyStat.day,
                    func.sum(DailyStat.earned),
                    func.sum(DailyStat.pending),
                )
                .join(Account, col(Account.id) == col(DailyStat.account_id))
                .where(Account.user_id == identity.id)
            )
            if start is not None:
                query = query.where(DailyStat.day >= start)
            if end is not None:
                query = query.where(DailyStat.day <= end)
            rows = db.exec(query.group_by(DailyStat.day).order_by(DailyStat.day)).all()
        days = [
            DayTotals(day=day, earned=float(earned or 0), pending=float(pending or 0))
            for day, earned, pending in rows
        ]
        return Aggregate(accounts_count=accounts_count, days=days)
