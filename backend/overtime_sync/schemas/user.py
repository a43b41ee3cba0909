"""Pydantic schema for the stored user record."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class UserRecord(BaseModel):
    username: str
    password_hash: str
    created_at: datetime
