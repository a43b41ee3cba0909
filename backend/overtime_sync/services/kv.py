"""Key-value store with per-key expiry on top of the ``kv_entries`` table."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from overtime_sync.models.kv import KVEntry

logger = logging.getLogger(__name__)


def user_key(username: str) -> str:
    return f"user:{username}"


def token_key(token: str) -> str:
    return f"token:{token}"


def data_key(username: str) -> str:
    return f"data:{username}"


def _as_aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_expired(entry: KVEntry, now: datetime) -> bool:
    return entry.expires_at is not None and _as_aware(entry.expires_at) <= now


class KeyValueStore:
    """Session-bound store. Writes are flushed; committing is the caller's job."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, key: str) -> str | None:
        entry = await self.session.get(KVEntry, key)
        if entry is None:
            return None
        if _is_expired(entry, datetime.now(timezone.utc)):
            await self.session.delete(entry)
            await self.session.flush()
            return None
        return entry.value

    async def put(self, key: str, value: str, expiration_ttl: int | None = None) -> None:
        expires_at = None
        if expiration_ttl is not None:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=expiration_ttl)

        entry = await self.session.get(KVEntry, key)
        if entry is None:
            self.session.add(KVEntry(key=key, value=value, expires_at=expires_at))
        else:
            entry.value = value
            entry.expires_at = expires_at
        await self.session.flush()

    async def delete(self, key: str) -> None:
        entry = await self.session.get(KVEntry, key)
        if entry is not None:
            await self.session.delete(entry)
            await self.session.flush()


async def purge_expired(session: AsyncSession) -> int:
    """Delete every expired entry and return how many rows went away."""

    now = datetime.now(timezone.utc)
    result = await session.execute(
        delete(KVEntry).where(KVEntry.expires_at.is_not(None), KVEntry.expires_at <= now)
    )
    count = result.rowcount or 0
    if count:
        logger.info("Purged %d expired key(s)", count)
    return count
