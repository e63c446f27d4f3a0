# wheeldeals/keyboards/main.py
from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

BTN_SPIN = "🎰 Spin"
BTN_REDEEM = "🎟 Redeem"
BTN_DASHBOARD = "📊 Dashboard"
BTN_HELP = "❓ Help"


def main_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_SPIN)],
            [KeyboardButton(text=BTN_REDEEM), KeyboardButton(text=BTN_DASHBOARD)],
            [KeyboardButton(text=BTN_HELP)],
        ],
        resize_keyboard=True,
        input_field_placeholder="Choose an action…",
        selective=False,
        one_time_keyboard=False,
    )
