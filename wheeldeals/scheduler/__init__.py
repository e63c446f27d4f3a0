from __future__ import annotations

import logging

from aiogram import Bot
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from wheeldeals.config.settings import Settings
from wheeldeals.database.session import Database
from wheeldeals.scheduler.jobs import DIGEST_JOB_ID, build_scheduler

log = logging.getLogger(__name__)


def setup_scheduler(bot: Bot, db: Database, settings: Settings) -> AsyncIOScheduler:
    scheduler = build_scheduler(bot=bot, db=db, settings=settings)
    scheduler.start()

    job = scheduler.get_job(DIGEST_JOB_ID)
    log.info(
        "Scheduler started (tz=%s), daily digest next run at %s",
        settings.timezone,
        job.next_run_time if job else "never",
    )
    return scheduler
