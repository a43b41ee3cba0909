"""Registration and login endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from overtime_sync.core import messages
from overtime_sync.core.dependencies import get_store
from overtime_sync.core.exceptions import InternalError, OvertimeError
from overtime_sync.schemas.auth import CredentialsRequest, LoginResponse, MessageResponse
from overtime_sync.services.kv import KeyValueStore
from overtime_sync.services.users import login_user, register_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=MessageResponse)
async def register(payload: CredentialsRequest, store: KeyValueStore = Depends(get_store)) -> MessageResponse:
    try:
        await register_user(store, payload.username, payload.password)
        await store.session.commit()
    except OvertimeError:
        raise
    except Exception as exc:
        logger.exception("Registration failed for %s", payload.username)
        raise InternalError(messages.REGISTER_FAILED) from exc
    return MessageResponse(message=messages.REGISTER_OK)


@router.post("/login", response_model=LoginResponse)
async def login(payload: CredentialsRequest, store: KeyValueStore = Depends(get_store)) -> LoginResponse:
    try:
        token = await login_user(store, payload.username, payload.password)
        await store.session.commit()
    except OvertimeError:
        raise
    except Exception as exc:
        logger.exception("Login failed for %s", payload.username)
        raise InternalError(messages.LOGIN_FAILED) from exc
    return LoginResponse(token=token, username=payload.username, message=messages.LOGIN_OK)
