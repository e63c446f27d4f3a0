# wheeldeals/handlers/merchant/staff_admin.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.repo import merchants_repo
from wheeldeals.database.tx import transactional
from wheeldeals.handlers.merchant.access import require_root_or_reply
from wheeldeals.services.auth import AuthService

router = Router()


def _parse_args(command: CommandObject) -> tuple[str, int] | None:
    """
    "<merchant_id> <telegram_id>"
    """
    parts = (command.args or "").split()
    if len(parts) != 2:
        return None
    try:
        return parts[0], int(parts[1])
    except ValueError:
        return None


@router.message(Command("staff_add"))
async def staff_add(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    if not await require_root_or_reply(message, settings):
        return

    parsed = _parse_args(command)
    if parsed is None:
        await message.answer("Usage: /staff_add &lt;merchant_id&gt; &lt;telegram_id&gt;")
        return
    merchant_id, telegram_id = parsed

    async with transactional(session, write=True):
        merchant = await merchants_repo.get_merchant(session, merchant_id)
        if merchant is not None:
            await AuthService(settings).grant_staff(session, merchant_id=merchant_id, telegram_id=telegram_id)

    if merchant is None:
        await message.answer("❌ Unknown merchant.")
        return
    await message.answer(f"✅ {telegram_id} is now staff of {merchant_id}.")


@router.message(Command("staff_remove"))
async def staff_remove(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    if not await require_root_or_reply(message, settings):
        return

    parsed = _parse_args(command)
    if parsed is None:
        await message.answer("Usage: /staff_remove &lt;merchant_id&gt; &lt;telegram_id&gt;")
        return
    merchant_id, telegram_id = parsed

    async with transactional(session, write=True):
        removed = await AuthService(settings).revoke_staff(session, merchant_id=merchant_id, telegram_id=telegram_id)
    await message.answer("✅ Staff access revoked." if removed else "ℹ️ No active staff access found.")
