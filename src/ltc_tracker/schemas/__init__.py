"""Pydantic schemas for API payloads. Not persisted to DB."""
from ltc_tracker.schemas.accounts import (AccountCreate, AccountDetail,
                                          AccountEnvelope, AccountOut,
                                          AccountUpdate, AddressSummary,
                                          Transaction)
from ltc_tracker.schemas.auth import (AuthResponse, CamelModel,
                                      ChangePasswordRequest, Identity,
                                      LoginRequest, SignupRequest,
                                      UpdateInfoRequest, UserOut)
from ltc_tracker.schemas.stats import (AccountStatsOut, DailyStatEnvelope,
                                       DailyStatOut, DailyStatUpdate,
                                       DailyStatWrite, DailyTotal)


class ErrorBody(CamelModel):
    """Machine-readable error returned by every failing API call."""

    error: str
    code: str
    details: list | None = None


__all__ = [
    "AccountCreate",
    "AccountDetail",
    "AccountEnvelope",
    "AccountOut",
    "AccountStatsOut",
    "AccountUpdate",
    "AddressSummary",
    "AuthResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "DailyStatEnvelope",
    "DailyStatOut",
    "DailyStatUpdate",
    "DailyStatWrite",
    "DailyTotal",
    "ErrorBody",
    "Identity",
    "LoginRequest",
    "SignupRequest",
    "Transaction",
    "UpdateInfoRequest",
    "UserOut",
]
