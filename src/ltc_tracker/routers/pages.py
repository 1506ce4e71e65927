"""Browsable pages (redirect mode).

Templates are rendered elsewhere; these routes return the view context a
template receives. Anonymous callers are redirected to /login.
"""
from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from ltc_tracker.deps import Accounts, OptionalIdentity, PageIdentity
from ltc_tracker.schemas import AccountDetail, AccountOut, Identity, UserOut

router = APIRouter(tags=["pages"])


def _user(identity: Identity) -> dict:
    return UserOut(**identity.model_dump()).model_dump(mode="json", by_alias=True)


@router.get("/")
def home(request: Request, identity: OptionalIdentity) -> RedirectResponse:
    settings = request.app.state.settings
    target = settings.home_path if identity is not None else settings.login_path
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/dashboard")
def dashboard(identity: PageIdentity) -> dict:
    return {"page": "dashboard", "user": _user(identity)}


@router.get("/accounts/{account_id}")
def account_details_page(account_id: int, identity: PageIdentity, accounts: Accounts) -> dict:
    account = accounts.get(identity, account_id)
    return {
        "page": "account-details",
        "user": _user(identity),
        "account": AccountDetail.from_account(account).model_dump(mode="json", by_alias=True),
    }


@router.get("/stats")
def stats_management_page(identity: PageIdentity, accounts: Accounts) -> dict:
    return {
        "page": "stats-management",
        "user": _user(identity),
        "accounts": [
            AccountOut.from_account(a).model_dump(mode="json", by_alias=True)
            for a in accounts.list_accounts(identity)
        ],
    }


@router.get("/input-stats")
def input_stats_page(identity: PageIdentity, accounts: Accounts) -> dict:
    return {
        "page": "input-stats",
        "user": _user(identity),
        "accounts": [
            {"id": a.id, "name": a.name, "ltcAddress": a.ltc_address}
            for a in accounts.list_accounts(identity)
        ],
    }
