from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from wheeldeals.config.settings import Settings
from wheeldeals.keyboards.main import BTN_HELP
from wheeldeals.utils.reply import reply_safe

router = Router(name="common")


@router.message(CommandStart())
async def cmd_start(message: Message, settings: Settings) -> None:
    await reply_safe(
        message,
        "🎡 <b>Welcome to Wheel Deals!</b>\n\n"
        "Spin a merchant's wheel, win a deal and show your code at the counter.\n"
        f"Everyone gets <b>{settings.daily_spin_limit} spins per merchant per day</b>.\n\n"
        "Use /help to see commands.",
        parse_mode="HTML",
    )


@router.message(Command("help"))
@router.message(F.text == BTN_HELP)
async def cmd_help(message: Message, settings: Settings) -> None:
    await reply_safe(
        message,
        "📌 Available commands:\n"
        "/spin - pick a merchant and spin\n"
        "/spin &lt;merchant_id&gt; - spin a specific merchant\n"
        "/left &lt;merchant_id&gt; - spins left today\n\n"
        "Merchant staff:\n"
        "/redeem &lt;code&gt; - redeem a customer's code\n"
        "/dashboard - spins and estimates\n\n"
        f"Codes expire {settings.code_ttl_days} days after the spin.",
    )
