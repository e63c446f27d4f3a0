# wheeldeals/handlers/merchant/redeem.py
from __future__ import annotations

import html
import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config.settings import Settings
from wheeldeals.database.models import User
from wheeldeals.handlers.merchant.access import require_staff_or_reply
from wheeldeals.keyboards.main import BTN_REDEEM
from wheeldeals.services.errors import AlreadyRedeemed, Expired, NotFound, StorageUnavailable
from wheeldeals.services.redeem import RedeemService
from wheeldeals.utils.reply import reply_safe

router = Router()
log = logging.getLogger(__name__)


@router.message(F.text == BTN_REDEEM)
async def redeem_help(message: Message) -> None:
    await reply_safe(message, "🎟 Send <code>/redeem WD-ABC123</code> with the customer's code.", parse_mode="HTML")


@router.message(Command("redeem"))
async def redeem_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    settings: Settings,
    db_user: User | None = None,
) -> None:
    authz = await require_staff_or_reply(message, settings, session, db_user)
    if authz is None:
        return

    code = (command.args or "").strip()
    if not code:
        await reply_safe(message, "Usage: /redeem WD-ABC123")
        return

    # the redemption opens its own write transaction
    await session.commit()
    try:
        res = await RedeemService.redeem_by_code(
            session,
            code,
            merchant_id=authz.merchant.id,
            redeemed_by_user_id=db_user.id,
        )
    except NotFound:
        text = "❌ Code not found."
    except AlreadyRedeemed:
        text = "⚠️ Already redeemed."
    except Expired:
        text = f"⏳ Code expired ({settings.code_ttl_days} days after issue)."
    except StorageUnavailable:
        log.exception("Redeem failed code=%r", code)
        text = "⚠️ Could not redeem right now. Please try again."
    else:
        text = f"✅ Redeemed: <b>{html.escape(res.prize_label)}</b> (<code>{res.code}</code>)"

    await reply_safe(message, text, parse_mode="HTML")
