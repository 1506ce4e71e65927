"""Account repository: owner-scoped CRUD and the verify toggle."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, delete, select

from ltc_tracker.db import Account, Database, DailyStat
from ltc_tracker.errors import Conflict
from ltc_tracker.schemas.auth import Identity
from ltc_tracker.security.ownership import Action, OwnershipGuard
from ltc_tracker.utils import utcnow

logger = logging.getLogger(__name__)

_DUPLICATE_NAME = "Account with this name already exists"
_DUPLICATE_ADDRESS = "Account with this LTC address already exists"


class AccountRepository:
    """Accounts belonging to the calling identity.

    Name and address pre-checks give precise messages; the unique
    constraints in the schema remain the authoritative guard, and an
    IntegrityError from a concurrent writer is reported as Conflict.
    """

    def __init__(self, database: Database, guard: OwnershipGuard) -> None:
        self._db = database
        self._guard = guard

    def _check_unique(
        self,
        db: Session,
        user_id: int,
        *,
        name: str | None = None,
        ltc_address: str | None = None,
        exclude_id: int | None = None,
    ) -> None:
        if name is not None:
            query = select(Account).where(Account.user_id == user_id, Account.name == name)
            if exclude_id is not None:
                query = query.where(Account.id != exclude_id)
            if db.exec(query).first():
                raise Conflict(_DUPLICATE_NAME)
        if ltc_address is not None:
            query = select(Account).where(Account.ltc_address == ltc_address)
            if exclude_id is not None:
                query = query.where(Account.id != exclude_id)
            if db.exec(query).first():
                raise Conflict(_DUPLICATE_ADDRESS)

    def list_accounts(self, identity: Identity) -> list[Account]:
        """All of the caller's accounts, newest first."""
        with self._db.session() as db:
            return list(
                db.exec(
                    select(Account)
                    .where(Account.user_id == identity.id)
                    .order_by(col(Account.created_at).desc(), col(Account.id).desc())
                ).all()
            )

    def get(self, identity: Identity, account_id: int) -> Account:
        with self._db.session() as db:
            return self._guard.account_for(db, identity, account_id, Action.READ)

    def create(self, identity: Identity, name: str, ltc_address: str) -> Account:
        account = Account(user_id=identity.id, name=name, ltc_address=ltc_address)
        try:
            with self._db.session() as db:
                self._check_unique(db, identity.id, name=name, ltc_address=ltc_address)
                db.add(account)
                db.flush()
        except IntegrityError as exc:
            raise Conflict("Account name or LTC address already exists") from exc
        logger.info("Account %s created for user_id=%s", account.id, identity.id)
        return account

    def update(
        self,
        identity: Identity,
        account_id: int,
        *,
        name: str | None = None,
        ltc_address: str | None = None,
    ) -> Account:
        """Rename and/or re-point an account, re-checking uniqueness."""
        try:
            with self._db.session() as db:
                account = self._guard.account_for(db, identity, account_id)
                self._check_unique(
                    db,
                    account.user_id,
                    name=name,
                    ltc_address=ltc_address,
                    exclude_id=account.id,
                )
                if name is not None:
                    account.name = name
                if ltc_address is not None:
                    account.ltc_address = ltc_address
                db.add(account)
                db.flush()
        except IntegrityError as exc:
            raise Conflict("Account name or LTC address already exists") from exc
        return account

    def set_verified(self, identity: Identity, account_id: int, verified: bool) -> Account:
        """Verify (stamp verified_at) or unverify (clear it).

        Repeating the current state is a Conflict and changes nothing.
        """
        with self._db.session() as db:
            account = self._guard.account_for(db, identity, account_id)
            if verified and account.verified_at is not None:
                raise Conflict("Account is already verified")
            if not verified and account.verified_at is None:
                raise Conflict("Account is not verified")
            account.verified_at = utcnow() if verified else None
            db.add(account)
        logger.info(
            "Account %s %s by user_id=%s",
            account_id,
            "verified" if verified else "unverified",
            identity.id,
        )
        return account

    def delete(self, identity: Identity, account_id: int) -> int:
        """Delete an account and all of its stats; returns the stats removed."""
        with self._db.session() as db:
            account = self._guard.account_for(db, identity, account_id)
            result = db.exec(delete(DailyStat).where(DailyStat.account_id == account.id))
            db.delete(account)
            removed = result.rowcount or 0
        logger.info(
            "Account %s deleted by user_id=%s with %d stat(s)",
            account_id,
            identity.id,
            removed,
        )
        return removed
