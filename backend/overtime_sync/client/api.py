"""HTTP client for the Overtime Sync API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from overtime_sync.core import messages
from overtime_sync.core.exceptions import InternalError, error_for_status
from overtime_sync.services.dataset import Dataset, is_valid_dataset

logger = logging.getLogger(__name__)


class OvertimeAPI:
    """Thin async wrapper translating HTTP failures into the error taxonomy."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url.strip().rstrip("/"), timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, token: str | None = None, **kwargs: Any) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise InternalError(messages.NETWORK_ERROR) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if response.is_error:
            raise error_for_status(response.status_code, body.get("error") or response.reason_phrase)
        return body

    async def register(self, username: str, password: str) -> str:
        body = await self._request("POST", "/api/register", json={"username": username, "password": password})
        return body.get("message", messages.REGISTER_OK)

    async def login(self, username: str, password: str) -> str:
        """Return a fresh bearer token."""

        body = await self._request("POST", "/api/login", json={"username": username, "password": password})
        token = body.get("token")
        if not token:
            raise InternalError(messages.LOGIN_FAILED)
        return token

    async def fetch_data(self, token: str) -> Dataset:
        body = await self._request("GET", "/api/data", token=token)
        data = body.get("data") or {}
        if not is_valid_dataset(data):
            raise InternalError(messages.DATA_INVALID)
        return data

    async def save_data(self, token: str, dataset: Dataset) -> None:
        await self._request("POST", "/api/data", token=token, json=dataset)
