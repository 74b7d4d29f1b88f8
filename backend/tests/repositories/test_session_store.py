"""Session Store — verifies expiry, touch, destroy and the reaper.

Invariants:
    - Expired rows load as None
    - reap_expired deletes only expired rows
"""

from datetime import datetime, timedelta, timezone

from fedlink.infrastructure.session_store import SessionStore

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
TTL = timedelta(hours=1)


async def test_create_and_load(test_db):
    """A created session loads its payload."""
    store = SessionStore(test_db, TTL)
    sid = await store.create({"user_id": 1}, now=NOW)
    assert await store.load(sid, now=NOW + timedelta(minutes=30)) == {"user_id": 1}


async def test_expired_session_loads_as_none(test_db):
    """An expired session loads like a missing one."""
    store = SessionStore(test_db, TTL)
    sid = await store.create({"user_id": 1}, now=NOW)
    assert await store.load(sid, now=NOW + timedelta(hours=2)) is None
    assert await store.load(None) is None
    assert await store.load("unknown-sid") is None


async def test_touch_extends_live_session_only(test_db):
    """touch() extends live sessions and ignores expired ones."""
    store = SessionStore(test_db, TTL)
    sid = await store.create({"user_id": 1}, now=NOW)
    assert await store.touch(sid, now=NOW + timedelta(minutes=50))
    assert await store.load(sid, now=NOW + timedelta(minutes=100)) == {"user_id": 1}
    assert not await store.touch(sid, now=NOW + timedelta(hours=5))


async def test_destroy(test_db):
    """A destroyed session no longer loads."""
    store = SessionStore(test_db, TTL)
    sid = await store.create({"user_id": 1}, now=NOW)
    await store.destroy(sid)
    assert await store.load(sid, now=NOW) is None


async def test_reap_expired_removes_only_expired(test_db):
    """The reaper deletes expired rows and keeps live ones."""
    store = SessionStore(test_db, TTL)
    await store.create({"user_id": 1}, now=NOW - timedelta(hours=3))
    live = await store.create({"user_id": 2}, now=NOW)
    assert await store.reap_expired(now=NOW) == 1
    assert await store.count() == 1
    assert await store.load(live, now=NOW) == {"user_id": 2}
