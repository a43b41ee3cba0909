"""Background scheduler for store housekeeping."""
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from overtime_sync.core.config import get_settings
from overtime_sync.db.session import get_session
from overtime_sync.services.kv import purge_expired

logger = logging.getLogger(__name__)

PURGE_JOB_ID = "purge-expired-keys"

_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
    return _scheduler


def start_scheduler() -> None:
    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler() -> None:
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    _scheduler = None


def schedule_purge_job() -> None:
    settings = get_settings()
    scheduler = get_scheduler()
    trigger = IntervalTrigger(seconds=settings.purge_interval_seconds)
    scheduler.add_job(purge_expired_entries, trigger=trigger, id=PURGE_JOB_ID, replace_existing=True)
    logger.info("Scheduled purge job every %s seconds", settings.purge_interval_seconds)


async def purge_expired_entries() -> int:
    """Drop expired tokens so the table does not grow without bound."""

    async with get_session() as session:
        try:
            count = await purge_expired(session)
            await session.commit()
        except Exception:
            logger.exception("Purging expired keys failed")
            raise
    return count
