# wheeldeals/keyboards/merchants.py
from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

SPIN_CB_PREFIX = "spin:"


def merchants_kb(merchants: list[tuple[str, str]]) -> InlineKeyboardMarkup:
    """
    merchants = [(merchant_id, name), ...]
    """
    kb = InlineKeyboardBuilder()
    for merchant_id, name in merchants:
        kb.add(
            InlineKeyboardButton(
                text=f"🎡 {name}",
                callback_data=f"{SPIN_CB_PREFIX}{merchant_id}",
            )
        )
    kb.adjust(1)
    return kb.as_markup()
