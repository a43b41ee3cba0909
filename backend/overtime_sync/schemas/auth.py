"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel


class CredentialsRequest(BaseModel):
    # Length rules are enforced by the user service so the messages stay localized
    username: str = ""
    password: str = ""


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    token: str
    username: str
    message: str
