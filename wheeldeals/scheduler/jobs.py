# wheeldeals/scheduler/jobs.py
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import date

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.repo import merchants_repo, stats_repo
from wheeldeals.services.merchant_stats import MerchantStatsService, money
from wheeldeals.utils.dates import TimeProvider, day_key

log = logging.getLogger(__name__)

DIGEST_JOB_ID = "send_daily_digest"


@dataclass(frozen=True, slots=True)
class Digest:
    chat_id: int
    text: str


# -------------------------------------------------
# Daily staff digest
# -------------------------------------------------

async def build_daily_digests(session: AsyncSession, day: date) -> list[Digest]:
    """
    One message per active staff member of each active merchant, about `day`.
    """
    out: list[Digest] = []
    for merchant in await merchants_repo.list_active_merchants(session):
        chat_ids = await merchants_repo.list_staff_telegram_ids(session, merchant.id)
        if not chat_ids:
            continue

        spins = await stats_repo.get_merchant_daily(session, merchant_id=merchant.id, day=day)
        payout = spins * MerchantStatsService.PAYOUT_PER_SPIN
        text = (
            f"📊 <b>{html.escape(merchant.name)}</b> · {day_key(day)}\n"
            f"• Spins: <b>{spins}</b>\n"
            f"• Est. payout: <b>{money(payout)}</b>"
        )
        out.extend(Digest(chat_id=chat_id, text=text) for chat_id in chat_ids)
    return out


async def send_daily_digest(bot: Bot, db, settings: Settings) -> None:
    day = TimeProvider(settings.timezone).yesterday()

    async with db.session() as session:
        digests = await build_daily_digests(session, day)

    sent = 0
    for d in digests:
        try:
            await bot.send_message(chat_id=d.chat_id, text=d.text, parse_mode="HTML")
            sent += 1
        except TelegramAPIError:
            # staff may have blocked the bot; keep going for the others
            log.warning("Digest not delivered to chat_id=%s", d.chat_id, exc_info=True)

    log.info("Daily digest for %s sent to %s/%s chats", day, sent, len(digests))


# -------------------------------------------------
# Scheduler setup
# -------------------------------------------------

def build_scheduler(bot: Bot, db, settings: Settings) -> AsyncIOScheduler:
    """
    Creates and returns an AsyncIOScheduler with our jobs registered.
    """
    scheduler = AsyncIOScheduler(timezone=settings.timezone)

    scheduler.add_job(
        send_daily_digest,
        trigger=CronTrigger(hour=settings.digest_hour, minute=0, timezone=settings.timezone),
        kwargs={"bot": bot, "db": db, "settings": settings},
        id=DIGEST_JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=600,
    )

    return scheduler
