from __future__ import annotations

from aiogram.types import CallbackQuery, Message

from wheeldeals.keyboards.main import main_menu_kb


async def reply_safe(target: Message | CallbackQuery, text: str, **kwargs) -> None:
    """
    Answers a message, or the message behind a callback button.

    Private chats get the main menu keyboard; groups never do. The callback
    itself is acknowledged so the button stops spinning.
    """
    if isinstance(target, CallbackQuery):
        await target.answer()
        message = target.message
        if not isinstance(message, Message):
            # inaccessible (too old) message: nothing to answer into
            return
    else:
        message = target

    if message.chat.type == "private":
        kwargs.setdefault("reply_markup", main_menu_kb())
    else:
        kwargs.setdefault("reply_markup", None)

    await message.answer(text, **kwargs)
