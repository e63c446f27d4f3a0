# wheeldeals/handlers/merchant/access.py
from __future__ import annotations

from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.models import User
from wheeldeals.services.auth import AuthResult, AuthService


async def require_staff_or_reply(
    message: Message,
    settings: Settings,
    session: AsyncSession,
    user: User | None,
) -> AuthResult | None:
    if user is None:
        await message.answer("⛔ Merchant staff only.")
        return None

    authz = await AuthService(settings).resolve(session, user)
    if not authz.is_staff:
        await message.answer("⛔ This account is not authorized for any merchant.")
        return None
    return authz


async def require_root_or_reply(message: Message, settings: Settings) -> bool:
    tg = message.from_user
    if not tg or not AuthService(settings).is_root(tg.id):
        await message.answer("⛔ You are not allowed to use admin commands.")
        return False
    return True
