"""Security helpers for password hashing and bearer tokens."""
from __future__ import annotations

import secrets

from passlib.context import CryptContext


_password_context = CryptContext(schemes=["argon2"], deprecated="auto")

TOKEN_BYTES = 32


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        return _password_context.verify(password, hashed)


def generate_token() -> str:
    """Return an unguessable URL-safe bearer token."""

    return secrets.token_urlsafe(TOKEN_BYTES)


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""

    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()
