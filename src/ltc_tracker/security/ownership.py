"""Ownership guard: the single place that decides who may touch a resource.

Every repository operation on a specific Account or DailyStat resolves the
owning chain (DailyStat -> Account -> User) through this module. A resource
that does not exist and one that belongs to someone else produce the same
NotFound error so tenants cannot probe for each other's ids.
"""
import logging
from enum import Enum

from sqlmodel import Session

from ltc_tracker.db import Account, DailyStat
from ltc_tracker.errors import NotFound
from ltc_tracker.schemas.auth import Identity

logger = logging.getLogger(__name__)


class Action(str, Enum):
    READ = "read"
    WRITE = "write"


class ResourceKind(str, Enum):
    ACCOUNT = "Account"
    DAILY_STAT = "Daily stat"


class OwnershipGuard:
    """Authorize identities against resource owners.

    Args:
        admin_can_read: Let admins read (never modify) other users' resources.
    """

    def __init__(self, *, admin_can_read: bool = True) -> None:
        self._admin_can_read = admin_can_read

    def authorize(
        self,
        identity: Identity | None,
        owner_id: int | None,
        action: Action = Action.WRITE,
    ) -> bool:
        if identity is None or owner_id is None:
            return False
        if identity.id == owner_id:
            return True
        return action == Action.READ and self._admin_can_read and identity.is_admin

    def _deny(self, identity: Identity | None, kind: ResourceKind, resource_id: int) -> NotFound:
        logger.debug(
            "Denied %s id=%s for user_id=%s",
            kind.value,
            resource_id,
            identity.id if identity else None,
        )
        return NotFound(f"{kind.value} not found")

    def account_for(
        self,
        db: Session,
        identity: Identity | None,
        account_id: int,
        action: Action = Action.WRITE,
    ) -> Account:
        """Load an account the identity may act on, or raise NotFound."""
        account = db.get(Account, account_id)
        if account is None or not self.authorize(identity, account.user_id, action):
            raise self._deny(identity, ResourceKind.ACCOUNT, account_id)
        return account

    def daily_stat_for(
        self,
        db: Session,
        identity: Identity | None,
        stat_id: int,
        action: Action = Action.WRITE,
    ) -> tuple[DailyStat, Account]:
        """Load a stat and its owning account, or raise NotFound.

        Ownership is checked on the account, not the denormalized user_id.
        """
        stat = db.get(DailyStat, stat_id)
        account = db.get(Account, stat.account_id) if stat is not None else None
        if account is None or not self.authorize(identity, account.user_id, action):
            raise self._deny(identity, ResourceKind.DAILY_STAT, stat_id)
        return stat, account
