"""Tests for the account repository."""
from datetime import date

import pytest
from sqlmodel import select

from ltc_tracker.db import DailyStat
from ltc_tracker.errors import Conflict, NotFound


class TestCreate:
    def test_create_and_get(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        assert account.id is not None
        assert account.user_id == alice.id
        assert account.verified_at is None
        assert accounts.get(alice, account.id).name == "Rig 1"

    def test_duplicate_name_for_same_owner(self, accounts, alice):
        accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        with pytest.raises(Conflict, match="name"):
            accounts.create(alice, "Rig 1", "LTC-ADDR-2")

    def test_same_name_for_different_owners(self, accounts, alice, bob):
        accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        assert accounts.create(bob, "Rig 1", "LTC-ADDR-2").user_id == bob.id

    def test_address_is_globally_unique(self, accounts, alice, bob):
        accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        with pytest.raises(Conflict, match="LTC address"):
            accounts.create(bob, "Rig 9", "LTC-ADDR-1")

    def test_list_is_owner_scoped(self, accounts, alice, bob):
        accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        accounts.create(alice, "Rig 2", "LTC-ADDR-2")
        accounts.create(bob, "Rig 3", "LTC-ADDR-3")
        names = {a.name for a in accounts.list_accounts(alice)}
        assert names == {"Rig 1", "Rig 2"}


class TestUpdate:
    def test_rename(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        updated = accounts.update(alice, account.id, name="Rig One")
        assert updated.name == "Rig One"
        assert updated.ltc_address == "LTC-ADDR-1"

    def test_keep_own_name_is_not_a_conflict(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        assert accounts.update(alice, account.id, name="Rig 1").name == "Rig 1"

    def test_rename_onto_sibling_conflicts(self, accounts, alice):
        accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        second = accounts.create(alice, "Rig 2", "LTC-ADDR-2")
        with pytest.raises(Conflict):
            accounts.update(alice, second.id, name="Rig 1")
        assert accounts.get(alice, second.id).name == "Rig 2"

    def test_other_user_cannot_update(self, accounts, alice, bob):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        with pytest.raises(NotFound):
            accounts.update(bob, account.id, name="Mine now")


class TestVerification:
    def test_verify_stamps_time(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        verified = accounts.set_verified(alice, account.id, True)
        assert verified.verified_at is not None

    def test_verify_twice_conflicts_and_keeps_timestamp(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        first = accounts.set_verified(alice, account.id, True).verified_at
        with pytest.raises(Conflict, match="already verified"):
            accounts.set_verified(alice, account.id, True)
        assert accounts.get(alice, account.id).verified_at == first

    def test_unverify_clears_timestamp(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        accounts.set_verified(alice, account.id, True)
        assert accounts.set_verified(alice, account.id, False).verified_at is None

    def test_unverify_unverified_conflicts(self, accounts, alice):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        with pytest.raises(Conflict, match="not verified"):
            accounts.set_verified(alice, account.id, False)

    def test_admin_cannot_verify_others(self, accounts, alice, admin):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        assert accounts.get(admin, account.id).id == account.id
        with pytest.raises(NotFound):
            accounts.set_verified(admin, account.id, True)


class TestDelete:
    def test_delete_cascades_to_own_stats_only(self, accounts, stats, database, alice):
        doomed = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        kept = accounts.create(alice, "Rig 2", "LTC-ADDR-2")
        stats.create(alice, doomed.id, date(2025, 1, 1), 1.0, 0.0)
        stats.create(alice, doomed.id, date(2025, 1, 2), 2.0, 0.0)
        stats.create(alice, kept.id, date(2025, 1, 1), 3.0, 0.0)

        assert accounts.delete(alice, doomed.id) == 2

        with pytest.raises(NotFound):
            accounts.get(alice, doomed.id)
        with database.session() as db:
            remaining = db.exec(select(DailyStat)).all()
        assert [s.account_id for s in remaining] == [kept.id]

    def test_other_user_cannot_delete(self, accounts, alice, bob):
        account = accounts.create(alice, "Rig 1", "LTC-ADDR-1")
        with pytest.raises(NotFound):
            accounts.delete(bob, account.id)
        assert accounts.get(alice, account.id).id == account.id
