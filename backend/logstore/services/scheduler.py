from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from logstore.core.config import Settings, settings
from logstore.db.session import SessionLocal
from logstore.tasks.cleanup_task import CleanupTask

_scheduler: AsyncIOScheduler | None = None


def start_scheduler(config: Settings = settings) -> None:
    global _scheduler
    if _scheduler:
        return
    _scheduler = AsyncIOScheduler(timezone=config.APP_TIMEZONE)
    _scheduler.add_job(
        _run_cleanup,
        CronTrigger(hour=config.CLEANUP_CRON_HOUR, minute=config.CLEANUP_CRON_MINUTE),
        args=[config],
        id="logstore_cleanup",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    _scheduler.start()
    logging.getLogger("scheduler").info(
        "[Scheduler] Log store cleanup scheduled at %02d:%02d (%s).",
        config.CLEANUP_CRON_HOUR,
        config.CLEANUP_CRON_MINUTE,
        config.APP_TIMEZONE,
    )


def stop_scheduler() -> None:
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None


def _run_cleanup(config: Settings) -> None:
    logger = logging.getLogger("scheduler")
    try:
        CleanupTask(config, SessionLocal).execute()
        logger.info("[Scheduler] Log store cleanup completed.")
    except Exception as exc:
        logger.exception("[Scheduler] Log store cleanup failed: %s", exc)
