"""Client session: local overtime cache, auth state and sync with the API."""
from __future__ import annotations

import asyncio
import copy
import enum
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path

from overtime_sync.client.api import OvertimeAPI
from overtime_sync.client.storage import DATA_KEY, TOKEN_KEY, USER_KEY, LocalStorage
from overtime_sync.core import messages
from overtime_sync.core.config import ClientSettings, get_client_settings
from overtime_sync.core.exceptions import OvertimeError, ValidationError
from overtime_sync.services import dataset as ds
from overtime_sync.services.dataset import Dataset, DayStatus, MonthStats

logger = logging.getLogger(__name__)

# The client cannot read the server settings, so it repeats the default
# `Settings.password_min_length` to fail fast before any request.
MIN_PASSWORD_LENGTH = 6


class SyncState(str, enum.Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class SyncStatus:
    state: SyncState
    message: str = ""


class OvertimeTracker:
    """Holds one user's session and overtime data.

    Only one full sync runs at a time.  Day edits are saved locally right away
    and pushed to the server in background tasks that nobody waits on; their
    failures are only logged.
    """

    def __init__(self, api: OvertimeAPI, storage: LocalStorage) -> None:
        self.api = api
        self.storage = storage
        self.current_user: str | None = None
        self.token: str | None = None
        self.overtime_data: Dataset = {}
        self.last_sync_time: datetime | None = None
        self.is_syncing = False
        self.sync_status = SyncStatus(SyncState.IDLE)
        self._uploads: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None) -> "OvertimeTracker":
        settings = settings or get_client_settings()
        tracker = cls(
            OvertimeAPI(settings.api_base_url, timeout=settings.request_timeout),
            LocalStorage(settings.storage_path),
        )
        tracker.load()
        return tracker

    @property
    def is_authenticated(self) -> bool:
        return bool(self.current_user and self.token)

    def load(self) -> None:
        """Restore the session and the cached dataset from local storage."""

        user = self.storage.get(USER_KEY)
        token = self.storage.get(TOKEN_KEY)
        if isinstance(user, dict) and user.get("username") and token:
            self.current_user = user["username"]
            self.token = token

        cached = self.storage.get(DATA_KEY)
        if cached is None:
            return
        if not isinstance(cached, dict):
            logger.warning("Discarding malformed cached dataset")
            return
        dropped = [key for key, days in cached.items() if not ds.is_valid_month(key, days)]
        if dropped:
            logger.warning("Dropping malformed cached months: %s", ", ".join(dropped))
        self.overtime_data = ds.valid_months(cached)

    def _persist_data(self) -> None:
        self.storage.set(DATA_KEY, self.overtime_data)

    # Authentication

    async def register(self, username: str, password: str, confirm_password: str | None = None) -> str:
        username, password = username.strip(), password.strip()
        if not username or not password:
            raise ValidationError(messages.CREDENTIALS_REQUIRED)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(messages.PASSWORD_LENGTH.format(min=MIN_PASSWORD_LENGTH))
        if confirm_password is not None and password != confirm_password.strip():
            raise ValidationError(messages.PASSWORD_MISMATCH)
        return await self.api.register(username, password)

    async def login(self, username: str, password: str) -> bool:
        """Log in, remember the session and run a first sync.

        Returns whether that sync succeeded; login errors propagate.
        """

        username, password = username.strip(), password.strip()
        if not username or not password:
            raise ValidationError(messages.CREDENTIALS_REQUIRED)
        token = await self.api.login(username, password)

        self.current_user = username
        self.token = token
        self.storage.set(USER_KEY, {"username": username})
        self.storage.set(TOKEN_KEY, token)
        return await self.sync()

    def logout(self) -> None:
        self.storage.remove(USER_KEY, TOKEN_KEY, DATA_KEY)
        self.current_user = None
        self.token = None
        self.overtime_data = {}
        self.last_sync_time = None
        self.sync_status = SyncStatus(SyncState.IDLE)

    # Sync

    async def sync(self) -> bool:
        """Pull, merge, persist and push back the dataset.

        Returns False without doing anything when there is no token or another
        sync is still running.
        """

        if not self.token or self.is_syncing:
            return False

        self.is_syncing = True
        self.sync_status = SyncStatus(SyncState.SYNCING, messages.SYNCING)
        try:
            remote = await self.api.fetch_data(self.token)
            self.overtime_data = ds.drop_empty_months(ds.merge_datasets(self.overtime_data, remote))
            self._persist_data()
            await self.api.save_data(self.token, copy.deepcopy(self.overtime_data))
        except OvertimeError as exc:
            logger.warning("Sync failed: %s", exc.message)
            self.sync_status = SyncStatus(SyncState.ERROR, messages.SYNC_FAILED)
            return False
        finally:
            self.is_syncing = False

        self.last_sync_time = datetime.now(timezone.utc)
        self.sync_status = SyncStatus(SyncState.SUCCESS, messages.SYNC_OK)
        return True

    async def upload(self) -> None:
        if not self.token:
            return
        await self.api.save_data(self.token, copy.deepcopy(self.overtime_data))

    def _schedule_upload(self) -> None:
        if not self.token:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, change stays local until the next sync")
            return
        snapshot = copy.deepcopy(self.overtime_data)
        task = loop.create_task(self.api.save_data(self.token, snapshot))
        self._uploads.add(task)
        task.add_done_callback(self._upload_done)

    def _upload_done(self, task: asyncio.Task[None]) -> None:
        self._uploads.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background upload failed: %s", exc)

    async def wait_for_uploads(self) -> None:
        """Wait until every background upload scheduled so far has finished."""

        if self._uploads:
            await asyncio.gather(*list(self._uploads), return_exceptions=True)

    async def aclose(self) -> None:
        await self.wait_for_uploads()
        await self.api.aclose()

    # Calendar data

    @staticmethod
    def _day_key(year: int, month: int, day: int) -> str:
        try:
            return ds.check_day(year, month, day)
        except (TypeError, ValueError) as exc:
            raise ValidationError(messages.DATE_INVALID) from exc

    def day_status(self, year: int, month: int, day: int) -> DayStatus:
        return ds.get_day_status(self.overtime_data, self._day_key(year, month, day), day)

    def set_day_status(self, year: int, month: int, day: int, status: DayStatus | str) -> None:
        """Write one day; an impossible date raises ``ValidationError`` and changes nothing."""

        key = self._day_key(year, month, day)
        ds.set_day_status(self.overtime_data, key, day, status)
        self._persist_data()
        self._schedule_upload()

    def toggle_day(self, year: int, month: int, day: int) -> DayStatus:
        """Advance a day to its next status and return it."""

        status = self.day_status(year, month, day).next()
        self.set_day_status(year, month, day, status)
        return status

    async def reset_month(self, year: int, month: int) -> None:
        self.overtime_data.pop(ds.month_key(year, month), None)
        self._persist_data()
        try:
            await self.upload()
        except OvertimeError as exc:
            logger.error("Upload after month reset failed: %s", exc.message)

    def month_stats(self, year: int, month: int) -> MonthStats:
        return ds.month_stats(self.overtime_data, ds.month_key(year, month))

    # Export / import

    def default_export_name(self, today: date | None = None) -> str:
        today = today or date.today()
        return f"overtime_{self.current_user or 'anonymous'}_{today.isoformat()}.json"

    def export_data(self, path: str | Path | None = None) -> Path:
        target = Path(path) if path is not None else Path.cwd()
        if target.is_dir():
            target = target / self.default_export_name()
        target.write_text(json.dumps(self.overtime_data, ensure_ascii=False, indent=2), encoding="utf-8")
        return target

    def import_data(self, path: str | Path) -> None:
        """Merge a previously exported file into the dataset.

        Months in the file replace the same months here.  A malformed file
        raises ``ValidationError`` and changes nothing.
        """

        try:
            imported = json.loads(Path(path).read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValidationError(messages.IMPORT_INVALID) from exc
        if not ds.is_valid_dataset(imported):
            raise ValidationError(messages.IMPORT_INVALID)

        self.overtime_data = ds.drop_empty_months(ds.merge_datasets(self.overtime_data, imported))
        self._persist_data()
        self._schedule_upload()
