"""Tests for the server-side session store."""
from sqlalchemy import DateTime
from sqlmodel import select

from ltc_tracker.db import Account, AuthSession, DailyStat, User
from ltc_tracker.security import fingerprint

FP = fingerprint("pytest-agent", "127.0.0.1")
OTHER_FP = fingerprint("other-agent", "127.0.0.1")


def _rows(database) -> list[AuthSession]:
    with database.session() as db:
        return list(db.exec(select(AuthSession)).all())


class TestCreateAndLookup:
    def test_round_trip(self, sessions, alice):
        token = sessions.create(alice.id, FP, user_agent="pytest-agent", ip_address="127.0.0.1")
        session = sessions.lookup(token, FP)
        assert session is not None
        assert session.user_id == alice.id
        assert session.user_agent == "pytest-agent"

    def test_token_is_random_hex(self, sessions, alice):
        first = sessions.create(alice.id, FP)
        second = sessions.create(alice.id, FP)
        assert first != second
        assert len(first) == 64
        int(first, 16)

    def test_expiry_is_created_plus_ttl(self, sessions, alice, clock):
        token = sessions.create(alice.id, FP)
        session = sessions.lookup(token, FP)
        assert session.expires_at - session.created_at == sessions.ttl
        assert session.created_at == clock.now

    def test_unknown_or_missing_token(self, sessions):
        assert sessions.lookup("deadbeef", FP) is None
        assert sessions.lookup(None, FP) is None
        assert sessions.lookup("", FP) is None


class TestFingerprintBinding:
    def test_mismatch_is_rejected(self, sessions, alice):
        token = sessions.create(alice.id, FP)
        assert sessions.lookup(token, OTHER_FP) is None

    def test_mismatch_does_not_destroy_session(self, sessions, alice, database):
        """The rightful owner stays logged in after a replay from another device."""
        token = sessions.create(alice.id, FP)
        assert sessions.lookup(token, OTHER_FP) is None
        assert len(_rows(database)) == 1
        assert sessions.lookup(token, FP) is not None


class TestExpiry:
    def test_expired_session_is_rejected_and_removed(self, sessions, alice, clock, database):
        token = sessions.create(alice.id, FP)
        clock.advance(hours=24)
        assert sessions.lookup(token, FP) is None
        assert _rows(database) == []

    def test_session_alive_just_before_expiry(self, sessions, alice, clock):
        token = sessions.create(alice.id, FP)
        clock.advance(hours=23, minutes=59)
        assert sessions.lookup(token, FP) is not None

    def test_purge_expired_removes_only_elapsed(self, sessions, alice, clock, database):
        old = sessions.create(alice.id, FP)
        clock.advance(hours=12)
        fresh = sessions.create(alice.id, FP)
        clock.advance(hours=13)

        assert sessions.purge_expired() == 1
        remaining = _rows(database)
        assert [row.token for row in remaining] == [fresh]
        assert sessions.lookup(old, FP) is None


class TestDestroy:
    def test_destroy_removes_session(self, sessions, alice):
        token = sessions.create(alice.id, FP)
        sessions.destroy(token)
        assert sessions.lookup(token, FP) is None

    def test_destroy_is_idempotent(self, sessions, alice):
        token = sessions.create(alice.id, FP)
        sessions.destroy(token)
        sessions.destroy(token)
        sessions.destroy(None)
        sessions.destroy("never-issued")

    def test_destroy_leaves_other_sessions(self, sessions, alice, bob):
        mine = sessions.create(alice.id, FP)
        theirs = sessions.create(bob.id, FP)
        sessions.destroy(mine)
        assert sessions.lookup(theirs, FP).user_id == bob.id


class TestTimestampStorage:
    def test_timestamp_columns_are_naive(self):
        for table, column in (
            (AuthSession, "created_at"),
            (AuthSession, "expires_at"),
            (User, "created_at"),
            (Account, "verified_at"),
            (DailyStat, "updated_at"),
        ):
            col_type = table.__table__.c[column].type
            assert isinstance(col_type, DateTime), f"{table.__name__}.{column}"
            assert col_type.timezone is False

    def test_session_persists_and_reads_back(self, sessions, alice, clock, database):
        token = sessions.create(alice.id, FP)
        [row] = _rows(database)
        assert row.created_at == clock.now
        assert row.created_at.tzinfo is None
        assert sessions.lookup(token, FP).expires_at == clock.now + sessions.ttl
