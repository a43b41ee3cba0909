"""Service layer for the per-user overtime dataset."""
from __future__ import annotations

import json
from typing import Any

from overtime_sync.core import messages
from overtime_sync.core.exceptions import ValidationError
from overtime_sync.services.dataset import Dataset, is_valid_dataset
from overtime_sync.services.kv import KeyValueStore, data_key


async def fetch_dataset(store: KeyValueStore, username: str) -> Dataset:
    raw = await store.get(data_key(username))
    return json.loads(raw) if raw else {}


async def save_dataset(store: KeyValueStore, username: str, payload: Any) -> None:
    """Replace the stored dataset. Last writer wins."""

    if not is_valid_dataset(payload):
        raise ValidationError(messages.DATA_INVALID)
    await store.put(data_key(username), json.dumps(payload, ensure_ascii=False))
