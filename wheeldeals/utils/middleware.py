# wheeldeals/utils/middleware.py
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from wheeldeals.database.repo.users import upsert_user_from_event
from wheeldeals.database.session import Database
from wheeldeals.database.tx import transactional


class DbSessionMiddleware(BaseMiddleware):
    """
    One DB session per update, injected as `session`.

    The Telegram user is upserted and committed in a short write transaction
    before the handler runs, and injected as `db_user`. Handlers therefore
    start on an idle session: spins and redemptions open their own write
    transaction and are committed before any reply goes out.

    Whatever the handler leaves pending is committed afterwards; errors roll back.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        async with self.db.SessionLocal() as session:
            data["session"] = session

            async with transactional(session, write=True):
                db_user = await upsert_user_from_event(session, event)
            if db_user is not None:
                data["db_user"] = db_user

            try:
                result = await handler(event, data)
            except Exception:
                await session.rollback()
                raise

            await session.commit()
            return result
