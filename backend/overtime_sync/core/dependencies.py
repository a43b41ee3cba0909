"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from overtime_sync.core.security import parse_bearer
from overtime_sync.db.session import get_session
from overtime_sync.services.kv import KeyValueStore
from overtime_sync.services.users import resolve_token


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


async def get_store(session: AsyncSession = Depends(get_db)) -> KeyValueStore:
    return KeyValueStore(session)


async def get_current_username(
    authorization: str | None = Header(default=None),
    store: KeyValueStore = Depends(get_store),
) -> str:
    return await resolve_token(store, parse_bearer(authorization))
