"""Session Store — server-side cookie sessions over the `session` table.

Invariants:
    - sid is an opaque random token (secrets.token_urlsafe); the cookie carries nothing else
    - load() treats a row whose expire is in the past exactly like a missing row
    - reap_expired() deletes expired rows and returns how many were removed
    - `now` is injectable for every time-dependent method (tests, reaper)
    - The reaper task survives storage errors and stops only on cancellation
"""

import asyncio
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.core.enforce_intervals import as_utc
from fedlink.core.errors import FedLinkError
from fedlink.models.web_session import WebSession

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    def __init__(self, db: AsyncSession, ttl: timedelta):
        self.db = db
        self.ttl = ttl

    async def create(self, payload: dict, now: datetime | None = None) -> str:
        sid = secrets.token_urlsafe(32)
        self.db.add(WebSession(sid=sid, sess=payload, expire=(now or _utc_now()) + self.ttl))
        await self.db.commit()
        logger.info("Session created", extra={"user_id": payload.get("user_id")})
        return sid

    async def load(self, sid: str | None, now: datetime | None = None) -> dict | None:
        if not sid:
            return None
        row = await self.db.get(WebSession, sid)
        if row is None or as_utc(row.expire) <= (now or _utc_now()):
            return None
        return row.sess

    async def touch(self, sid: str, now: datetime | None = None) -> bool:
        """Extend a live session by the TTL. Returns False if it is missing or expired."""
        row = await self.db.get(WebSession, sid)
        current = now or _utc_now()
        if row is None or as_utc(row.expire) <= current:
            return False
        row.expire = current + self.ttl
        await self.db.commit()
        return True

    async def destroy(self, sid: str | None) -> None:
        if not sid:
            return
        await self.db.execute(
            delete(WebSession).where(WebSession.sid == sid)
            .execution_options(synchronize_session="fetch"),
        )
        await self.db.commit()

    async def reap_expired(self, now: datetime | None = None) -> int:
        result = await self.db.execute(
            delete(WebSession).where(WebSession.expire <= (now or _utc_now()))
            .execution_options(synchronize_session="fetch"),
        )
        await self.db.commit()
        if result.rowcount:
            logger.info("Expired sessions reaped", extra={"session_count": result.rowcount})
        return result.rowcount

    async def count(self) -> int:
        result = await self.db.execute(select(WebSession.sid))
        return len(result.scalars().all())


async def run_session_reaper(manager, ttl: timedelta, interval_seconds: float) -> None:
    """Periodically delete expired sessions until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            async with manager.session() as db:
                await SessionStore(db, ttl).reap_expired()
        except FedLinkError as e:
            logger.error(f"Session reaper failed: {e.message}", extra={"error_code": e.code})
