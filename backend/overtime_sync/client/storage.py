"""Local persistent storage for the client, kept in a single JSON file."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

USER_KEY = "overtime_user"
TOKEN_KEY = "overtime_token"
DATA_KEY = "overtime_data"


class LocalStorage:
    """String key/value storage that survives restarts."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                loaded = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable local storage at %s", self.path, exc_info=True)
            return {}
        return loaded if isinstance(loaded, dict) else {}

    def _write(self, items: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove(self, *keys: str) -> None:
        items = self._read()
        for key in keys:
            items.pop(key, None)
        self._write(items)
