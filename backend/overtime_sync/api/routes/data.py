"""Overtime dataset endpoints."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from overtime_sync.core import messages
from overtime_sync.core.dependencies import get_current_username, get_store
from overtime_sync.core.exceptions import InternalError, OvertimeError
from overtime_sync.schemas.auth import MessageResponse
from overtime_sync.schemas.data import DataResponse
from overtime_sync.services import data as data_service
from overtime_sync.services.kv import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


@router.get("", response_model=DataResponse)
async def get_data(
    username: str = Depends(get_current_username),
    store: KeyValueStore = Depends(get_store),
) -> DataResponse:
    try:
        dataset = await data_service.fetch_dataset(store, username)
    except OvertimeError:
        raise
    except Exception as exc:
        logger.exception("Fetching data failed for %s", username)
        raise InternalError(messages.FETCH_FAILED) from exc
    return DataResponse(data=dataset)


@router.post("", response_model=MessageResponse)
async def save_data(
    payload: Any = Body(default=None),
    username: str = Depends(get_current_username),
    store: KeyValueStore = Depends(get_store),
) -> MessageResponse:
    try:
        await data_service.save_dataset(store, username, payload)
        await store.session.commit()
    except OvertimeError:
        raise
    except Exception as exc:
        logger.exception("Saving data failed for %s", username)
        raise InternalError(messages.SAVE_FAILED) from exc
    return MessageResponse(message=messages.DATA_SAVED)
