"""Account request/response schemas."""
from datetime import datetime

from pydantic import Field, field_validator

from ltc_tracker.db import Account
from ltc_tracker.schemas.auth import CamelModel
from ltc_tracker.utils import utcnow, whole_days_since


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class AccountCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    ltc_address: str = Field(min_length=1, max_length=128)

    @field_validator("name", "ltc_address")
    @classmethod
    def _strip(cls, v: str) -> str:
        return _strip_required(v)


class AccountUpdate(CamelModel):
    """Partial update; omitted fields keep their current value."""

    name: str | None = Field(default=None, max_length=100)
    ltc_address: str | None = Field(default=None, max_length=128)

    @field_validator("name", "ltc_address")
    @classmethod
    def _strip_optional(cls, v: str | None) -> str | None:
        return _strip_required(v) if v is not None else None


class AccountOut(CamelModel):
    id: int
    name: str
    ltc_address: str
    created_at: datetime
    verified_at: datetime | None = None
    is_verified: bool = False
    verification_days: int | None = None

    @classmethod
    def from_account(cls, account: Account, now: datetime | None = None) -> "AccountOut":
        verified_at = account.verified_at
        return cls(
            id=account.id,
            name=account.name,
            ltc_address=account.ltc_address,
            created_at=account.created_at,
            verified_at=verified_at,
            is_verified=verified_at is not None,
            verification_days=(
                whole_days_since(verified_at, now or utcnow()) if verified_at else None
            ),
        )


class AccountDetail(AccountOut):
    verification_info: str

    @classmethod
    def from_account(cls, account: Account, now: datetime | None = None) -> "AccountDetail":
        base = AccountOut.from_account(account, now)
        if base.verification_days is None:
            info = "Pending verification"
        else:
            info = f"Verified in {base.verification_days} day(s)"
        return cls(**base.model_dump(), verification_info=info)


class AccountEnvelope(CamelModel):
    success: bool = True
    message: str
    data: AccountOut | None = None


class Transaction(CamelModel):
    txid: str
    confirmed: datetime | None = None
    value: int
    confirmations: int = 0
    block_height: int | None = None
    double_spend: bool = False
    direction: str  # received | sent
    amount_ltc: float


class AddressSummary(CamelModel):
    """Balance and recent transactions of an LTC address (amounts in litoshi)."""

    address: str
    total_received: int = 0
    total_sent: int = 0
    balance: int = 0
    final_balance: int = 0
    tx_count: int = 0
    unconfirmed_tx_count: int = 0
    transactions: list[Transaction] = Field(default_factory=list)
