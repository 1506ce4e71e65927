"""Database models for the LTC tracker.

Timestamps are naive UTC (see utils.utcnow) stored in plain DateTime
columns. Uniqueness rules live in the schema (unique columns and composite
constraints) so concurrent writers are stopped by the database itself;
repository pre-checks only exist to produce friendlier error messages.
"""
from datetime import date, datetime
from enum import Enum

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from ltc_tracker.utils import utcnow


class Role(str, Enum):
    """Flat role model: regular users and admins."""

    USER = "user"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """Login identity. Email is stored lowercased."""

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    display_name: str
    role: Role = Field(default=Role.USER)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)


class AuthSession(SQLModel, table=True):
    """Server-side login session named by an opaque token."""

    id: int | None = Field(default=None, primary_key=True)
    token: str = Field(unique=True, index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    fingerprint: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    expires_at: datetime = Field(index=True, sa_type=DateTime)
    user_agent: str | None = None
    ip_address: str | None = None


class Account(SQLModel, table=True):
    """A mining account watched by its owner."""

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_account_owner_name"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    ltc_address: str = Field(unique=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    verified_at: datetime | None = Field(default=None, sa_type=DateTime)


class DailyStat(SQLModel, table=True):
    """Earned/pending amounts for one account on one UTC calendar day."""

    __table_args__ = (
        UniqueConstraint("account_id", "day", name="uq_daily_stat_account_day"),
    )

    id: int | None = Field(default=None, primary_key=True)
    account_id: int = Field(foreign_key="account.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)  # denormalized owner
    day: date
    earned: float = 0.0
    pending: float = 0.0
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime | None = Field(default=None, sa_type=DateTime)
