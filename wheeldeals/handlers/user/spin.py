# wheeldeals/handlers/user/spin.py
from __future__ import annotations

import html
import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.models import User
from wheeldeals.database.repo import merchants_repo
from wheeldeals.keyboards.main import BTN_SPIN
from wheeldeals.keyboards.merchants import SPIN_CB_PREFIX, merchants_kb
from wheeldeals.services.errors import InvalidInput, QuotaExceeded, StorageUnavailable, UnknownMerchant
from wheeldeals.services.spin import IssuedSpin, SpinService
from wheeldeals.utils.dates import TimeProvider, day_key
from wheeldeals.utils.reply import reply_safe

router = Router()
log = logging.getLogger(__name__)


def _issued_text(res: IssuedSpin, merchant_name: str) -> str:
    return (
        f"🎉 <b>You won: {html.escape(res.prize_label)}</b>\n"
        f"Merchant: <b>{html.escape(merchant_name)}</b>\n\n"
        f"Your code: <code>{res.code}</code>\n"
        f"Show it at the counter before <b>{res.expires_at:%Y-%m-%d %H:%M} UTC</b>.\n\n"
        f"Spins left today: <b>{res.remaining_after}</b>"
    )


async def _do_spin(session: AsyncSession, settings: Settings, *, user: User, merchant_id: str) -> str:
    """
    Runs the spin in its own write transaction; returns the reply text.
    The spin is committed (or rolled back) before the caller replies.
    """
    today = TimeProvider(settings.timezone).today()
    try:
        res = await SpinService.spin(
            session,
            user_id=user.id,
            merchant_id=merchant_id,
            day=today,
            daily_limit=settings.daily_spin_limit,
            ttl_days=settings.code_ttl_days,
        )
    except UnknownMerchant:
        return "❌ This merchant is not available."
    except QuotaExceeded as e:
        return (
            "⛔ <b>Daily limit reached</b>\n"
            f"You used all {e.daily_limit} spins for this merchant today ({day_key(today)}).\n"
            "Come back tomorrow!"
        )
    except InvalidInput:
        log.warning("Spin rejected user=%s merchant=%s", user.id, merchant_id, exc_info=True)
        return "⚠️ This merchant's wheel is not set up correctly. Please try another merchant."
    except StorageUnavailable:
        log.exception("Spin failed user=%s merchant=%s", user.id, merchant_id)
        return "⚠️ Could not save your spin. Please try again in a moment."

    # loaded by the spin above: identity map, no query
    merchant = await merchants_repo.get_merchant(session, merchant_id)
    return _issued_text(res, merchant.name if merchant else merchant_id)


@router.message(Command("spin"))
@router.message(F.text == BTN_SPIN)
async def spin_cmd(
    message: Message,
    session: AsyncSession,
    settings: Settings,
    db_user: User,
    command: CommandObject | None = None,
) -> None:
    merchant_id = (command.args or "").strip() if command else ""
    if merchant_id:
        text = await _do_spin(session, settings, user=db_user, merchant_id=merchant_id)
        await reply_safe(message, text, parse_mode="HTML")
        return

    merchants = await merchants_repo.list_active_merchants(session)
    await session.commit()
    if not merchants:
        await reply_safe(message, "ℹ️ No active merchants yet.")
        return

    await message.answer(
        f"🎡 <b>Pick a merchant to spin</b>\nLimit: <b>{settings.daily_spin_limit} spins/day</b> per merchant",
        parse_mode="HTML",
        reply_markup=merchants_kb([(m.id, m.name) for m in merchants]),
    )


@router.callback_query(F.data.startswith(SPIN_CB_PREFIX))
async def spin_pick(cb: CallbackQuery, session: AsyncSession, settings: Settings, db_user: User) -> None:
    merchant_id = (cb.data or "")[len(SPIN_CB_PREFIX):].strip()
    if not merchant_id:
        await reply_safe(cb, "❌ Invalid merchant.")
        return

    text = await _do_spin(session, settings, user=db_user, merchant_id=merchant_id)
    await reply_safe(cb, text, parse_mode="HTML")
