# wheeldeals/handlers/user/quota.py
from __future__ import annotations

import html

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.models import User
from wheeldeals.database.repo import merchants_repo
from wheeldeals.services.spin import SpinService
from wheeldeals.utils.dates import TimeProvider
from wheeldeals.utils.reply import reply_safe

router = Router()


@router.message(Command("left"))
async def left_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    settings: Settings,
    db_user: User,
) -> None:
    merchant_id = (command.args or "").strip()
    if not merchant_id:
        await reply_safe(message, "Usage: /left &lt;merchant_id&gt;")
        return

    merchant = await merchants_repo.get_merchant(session, merchant_id)
    if merchant is None or not merchant.active:
        await reply_safe(message, "❌ This merchant is not available.")
        return

    left = await SpinService.remaining_today(
        session,
        user_id=db_user.id,
        merchant_id=merchant.id,
        day=TimeProvider(settings.timezone).today(),
        daily_limit=settings.daily_spin_limit,
    )
    await reply_safe(
        message,
        f"🎡 <b>{html.escape(merchant.name)}</b>\nSpins left today: <b>{left}</b>",
        parse_mode="HTML",
    )
