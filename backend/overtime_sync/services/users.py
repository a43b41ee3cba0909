"""User service functions for registration, login and token lookup."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from overtime_sync.core import messages
from overtime_sync.core.config import get_settings
from overtime_sync.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from overtime_sync.core.security import PasswordHasher, generate_token
from overtime_sync.schemas.user import UserRecord
from overtime_sync.services.kv import KeyValueStore, token_key, user_key

logger = logging.getLogger(__name__)


def validate_credentials(username: str, password: str) -> None:
    settings = get_settings()
    if not username or not password:
        raise ValidationError(messages.CREDENTIALS_REQUIRED)
    if not settings.username_min_length <= len(username) <= settings.username_max_length:
        raise ValidationError(
            messages.USERNAME_LENGTH.format(min=settings.username_min_length, max=settings.username_max_length)
        )
    if len(password) < settings.password_min_length:
        raise ValidationError(messages.PASSWORD_LENGTH.format(min=settings.password_min_length))


async def get_user(store: KeyValueStore, username: str) -> UserRecord | None:
    raw = await store.get(user_key(username))
    if raw is None:
        return None
    return UserRecord.model_validate_json(raw)


async def register_user(store: KeyValueStore, username: str, password: str) -> UserRecord:
    validate_credentials(username, password)
    if await get_user(store, username) is not None:
        raise ConflictError(messages.USER_EXISTS)

    user = UserRecord(
        username=username,
        password_hash=PasswordHasher.hash(password),
        created_at=datetime.now(timezone.utc),
    )
    await store.put(user_key(username), user.model_dump_json())
    logger.info("Registered user %s", username)
    return user


async def login_user(store: KeyValueStore, username: str, password: str) -> str:
    """Check the credentials and mint a new bearer token for the user."""

    if not username or not password:
        raise ValidationError(messages.CREDENTIALS_REQUIRED)
    user = await get_user(store, username)
    if user is None:
        raise NotFoundError(messages.USER_NOT_FOUND)
    if not PasswordHasher.verify(password, user.password_hash):
        raise AuthError(messages.WRONG_PASSWORD)

    token = generate_token()
    await store.put(token_key(token), user.username, expiration_ttl=get_settings().token_ttl_seconds)
    return token


async def resolve_token(store: KeyValueStore, token: str | None) -> str:
    """Return the username owning ``token`` or raise ``AuthError``."""

    if not token:
        raise AuthError(messages.UNAUTHORIZED)
    username = await store.get(token_key(token))
    if not username:
        raise AuthError(messages.TOKEN_INVALID)
    return username
