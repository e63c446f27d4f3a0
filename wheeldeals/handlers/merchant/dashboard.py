# wheeldeals/handlers/merchant/dashboard.py
from __future__ import annotations

import html

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.models import User
from wheeldeals.handlers.merchant.access import require_staff_or_reply
from wheeldeals.keyboards.main import BTN_DASHBOARD
from wheeldeals.services.merchant_stats import MerchantDashboard, MerchantStatsService, money
from wheeldeals.utils.dates import TimeProvider, day_key
from wheeldeals.utils.reply import reply_safe

router = Router()


def render_dashboard(d: MerchantDashboard) -> str:
    return (
        f"📊 <b>{html.escape(d.merchant_name)}</b> ({day_key(d.today)})\n\n"
        f"<b>Today</b>\n"
        f"• Spins: <b>{d.spins_today}</b>\n"
        f"• Est. revenue: <b>{money(d.revenue_today)}</b>\n"
        f"• Est. payout: <b>{money(d.payout_today)}</b>\n\n"
        f"<b>Last {d.window_days} days</b>\n"
        f"• Spins: <b>{d.spins_window}</b>\n"
        f"• Est. revenue: <b>{money(d.revenue_window)}</b>\n"
        f"• Est. payout: <b>{money(d.payout_window)}</b>\n"
        f"• Redemption rate: <b>{d.redeem_rate_window:.0%}</b>\n\n"
        f"<i>Estimates only: {money(MerchantStatsService.PRICE_PER_SPIN)}/spin, "
        f"{money(MerchantStatsService.PAYOUT_PER_SPIN)} payout/spin.</i>"
    )


@router.message(Command("dashboard"))
@router.message(F.text == BTN_DASHBOARD)
async def dashboard_cmd(
    message: Message,
    session: AsyncSession,
    settings: Settings,
    db_user: User | None = None,
) -> None:
    authz = await require_staff_or_reply(message, settings, session, db_user)
    if authz is None:
        return

    d = await MerchantStatsService.dashboard(
        session,
        merchant=authz.merchant,
        today=TimeProvider(settings.timezone).today(),
    )
    await reply_safe(message, render_dashboard(d), parse_mode="HTML")
