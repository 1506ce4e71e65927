"""Tests for the background task that purges expired sessions."""
import asyncio
import time
from dataclasses import replace
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from ltc_tracker.container import init_container
from ltc_tracker.db import AuthSession
from ltc_tracker.main import create_app, reap_sessions_forever
from ltc_tracker.utils import utcnow


def _add_session(database, token: str, expires_in: timedelta) -> None:
    now = utcnow()
    with database.session() as db:
        db.add(
            AuthSession(
                token=token,
                user_id=1,
                fingerprint="fp",
                created_at=now - timedelta(days=2),
                expires_at=now + expires_in,
            )
        )


def _tokens(database) -> set[str]:
    with database.session() as db:
        return {row.token for row in db.exec(select(AuthSession)).all()}


class TestReapSessionsForever:
    def test_purges_expired_and_cancels_cleanly(self, settings):
        container = init_container(settings)
        database = container.database()
        database.init()
        _add_session(database, "elapsed", timedelta(hours=-1))
        _add_session(database, "live", timedelta(hours=1))

        async def run() -> set[str]:
            task = asyncio.create_task(reap_sessions_forever(container, 0.01))
            for _ in range(300):
                await asyncio.sleep(0.01)
                if "elapsed" not in _tokens(database):
                    break
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            assert task.cancelled()
            return _tokens(database)

        assert asyncio.run(run()) == {"live"}
        database.dispose()

    def test_survives_a_failing_purge(self, settings):
        container = init_container(settings)
        calls = []

        class FlakyStore:
            def purge_expired(self) -> int:
                calls.append(1)
                if len(calls) == 1:
                    raise RuntimeError("database went away")
                return 0

        container.session_store.override(FlakyStore())

        async def run() -> None:
            task = asyncio.create_task(reap_sessions_forever(container, 0.01))
            for _ in range(300):
                await asyncio.sleep(0.01)
                if len(calls) >= 2:
                    break
            assert not task.done()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())
        assert len(calls) >= 2


class TestLifespanReaper:
    def test_app_reaps_in_background(self, settings):
        app = create_app(replace(settings, session_reap_interval=0.01))
        database = app.state.container.database()

        with TestClient(app):
            _add_session(database, "elapsed", timedelta(hours=-1))
            deadline = time.monotonic() + 5
            while "elapsed" in _tokens(database) and time.monotonic() < deadline:
                time.sleep(0.02)
            assert "elapsed" not in _tokens(database)
