"""Server-side session store.

Sessions are rows in the ``authsession`` table named by a random 256-bit
token. Each method runs in its own transaction, so a lookup racing a
logout either sees the whole row or nothing.
"""
import hmac
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlmodel import delete, select

from ltc_tracker.db import AuthSession, Database
from ltc_tracker.utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
TOKEN_BYTES = 32


def _token_prefix(token: str) -> str:
    return token[:8]


class SessionStore:
    """Create, look up and destroy login sessions.

    Expired sessions are deleted the first time they are looked up;
    purge_expired() removes the rest in bulk.
    """

    def __init__(
        self,
        database: Database,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._db = database
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def create(
        self,
        user_id: int,
        fingerprint: str,
        *,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> str:
        """Persist a new session for ``user_id`` and return its token."""
        token = secrets.token_hex(TOKEN_BYTES)
        now = self._clock()
        record = AuthSession(
            token=token,
            user_id=user_id,
            fingerprint=fingerprint,
            created_at=now,
            expires_at=now + self._ttl,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        with self._db.session() as db:
            db.add(record)
        logger.info("Session %s... created for user_id=%s", _token_prefix(token), user_id)
        return token

    def lookup(self, token: str | None, fingerprint: str) -> AuthSession | None:
        """Return the live session for ``token`` or None.

        Fails closed: unknown token, expiry and fingerprint mismatch all
        return None. Only expiry deletes the record; a mismatching client may
        be a stolen token replayed elsewhere and must not log the owner out.
        """
        if not token:
            return None
        with self._db.session() as db:
            record = db.exec(
                select(AuthSession).where(AuthSession.token == token)
            ).first()
            if record is None:
                return None
            if self._clock() >= record.expires_at:
                db.delete(record)
                logger.info("Session %s... expired; removed", _token_prefix(token))
                return None
            if not hmac.compare_digest(record.fingerprint, fingerprint):
                logger.warning(
                    "Session %s... presented with a different fingerprint",
                    _token_prefix(token),
                )
                return None
            return record

    def destroy(self, token: str | None) -> None:
        """Delete the session if present. Idempotent."""
        if not token:
            return
        with self._db.session() as db:
            db.exec(delete(AuthSession).where(AuthSession.token == token))
        logger.info("Session %s... destroyed", _token_prefix(token))

    def purge_expired(self) -> int:
        """Delete every elapsed session; returns the number removed."""
        with self._db.session() as db:
            result = db.exec(
                delete(AuthSession).where(AuthSession.expires_at <= self._clock())
            )
            removed = result.rowcount or 0
        if removed:
            logger.info("Purged %d expired session(s)", removed)
        return removed
