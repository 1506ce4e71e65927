"""Account routes (reject mode: anonymous callers get 401)."""
import logging

import httpx
from fastapi import APIRouter, Query, status
from starlette.concurrency import run_in_threadpool

from ltc_tracker.deps import Accounts, Addresses, ApiIdentity, DailyStats
from ltc_tracker.errors import MalformedInput
from ltc_tracker.providers import UpstreamErrorMapper
from ltc_tracker.routers.params import ERROR_RESPONSES, parse_day_param
from ltc_tracker.schemas import (AccountCreate, AccountDetail, AccountEnvelope,
                                 AccountOut, AccountUpdate, AddressSummary,
                                 DailyStatOut)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/accounts", tags=["accounts"], responses=ERROR_RESPONSES)

_blockcypher_errors = UpstreamErrorMapper(resource_name="Address", api_name="BlockCypher")


@router.get("", response_model=list[AccountOut])
def list_accounts(identity: ApiIdentity, accounts: Accounts) -> list[AccountOut]:
    """All of the caller's accounts, newest first."""
    return [AccountOut.from_account(a) for a in accounts.list_accounts(identity)]


@router.post("", response_model=AccountEnvelope, status_code=status.HTTP_201_CREATED)
def create_account(
    body: AccountCreate,
    identity: ApiIdentity,
    accounts: Accounts,
) -> AccountEnvelope:
    account = accounts.create(identity, body.name, body.ltc_address)
    return AccountEnvelope(
        message="Account created successfully",
        data=AccountOut.from_account(account),
    )


@router.get("/{account_id}", response_model=AccountDetail)
def get_account(account_id: int, identity: ApiIdentity, accounts: Accounts) -> AccountDetail:
    """Account details with verification age."""
    return AccountDetail.from_account(accounts.get(identity, account_id))


@router.put("/{account_id}", response_model=AccountEnvelope)
def update_account(
    account_id: int,
    body: AccountUpdate,
    identity: ApiIdentity,
    accounts: Accounts,
) -> AccountEnvelope:
    if body.name is None and body.ltc_address is None:
        raise MalformedInput("Nothing to update: provide name and/or ltcAddress")
    account = accounts.update(
        identity, account_id, name=body.name, ltc_address=body.ltc_address
    )
    return AccountEnvelope(
        message="Account updated successfully",
        data=AccountOut.from_account(account),
    )


@router.delete("/{account_id}", response_model=AccountEnvelope)
def delete_account(account_id: int, identity: ApiIdentity, accounts: Accounts) -> AccountEnvelope:
    accounts.delete(identity, account_id)
    return AccountEnvelope(message="Account and associated stats deleted successfully")


@router.patch("/{account_id}/verify", response_model=AccountEnvelope)
def verify_account(account_id: int, identity: ApiIdentity, accounts: Accounts) -> AccountEnvelope:
    account = accounts.set_verified(identity, account_id, True)
    return AccountEnvelope(
        message="Account verified successfully",
        data=AccountOut.from_account(account),
    )


@router.patch("/{account_id}/unverify", response_model=AccountEnvelope)
def unverify_account(account_id: int, identity: ApiIdentity, accounts: Accounts) -> AccountEnvelope:
    account = accounts.set_verified(identity, account_id, False)
    return AccountEnvelope(
        message="Account unverified successfully",
        data=AccountOut.from_account(account),
    )


@router.get("/{account_id}/daily-stats", response_model=list[DailyStatOut])
def list_account_stats(
    account_id: int,
    identity: ApiIdentity,
    stats: DailyStats,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
) -> list[DailyStatOut]:
    """Stats of one account, newest day first."""
    rows = stats.list_stats(
        identity,
        account_id=account_id,
        start=parse_day_param(start_date, "startDate"),
        end=parse_day_param(end_date, "endDate"),
    )
    return [DailyStatOut.from_stat(s) for s in rows]


@router.get("/{account_id}/transactions", response_model=AddressSummary)
async def get_account_transactions(
    account_id: int,
    identity: ApiIdentity,
    accounts: Accounts,
    addresses: Addresses,
) -> AddressSummary:
    """Balance and recent transactions of the account's LTC address."""
    account = await run_in_threadpool(accounts.get, identity, account_id)
    try:
        return await addresses.get_address(account.ltc_address)
    except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
        logger.warning("BlockCypher lookup for account %s failed: %s", account_id, e)
        _blockcypher_errors.raise_http(e, key=account.ltc_address)
