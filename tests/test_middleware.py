from types import SimpleNamespace

import pytest
from sqlalchemy import select

from wheeldeals.database.models import User
from wheeldeals.utils.middleware import DbSessionMiddleware


def _event(tg_id: int, username: str = "carol"):
    return SimpleNamespace(from_user=SimpleNamespace(id=tg_id, username=username, first_name="Carol", last_name=None))


async def test_user_is_committed_before_handler_runs(db):
    seen = {}

    async def handler(event, data):
        seen["in_transaction"] = data["session"].in_transaction()
        seen["db_user_tg"] = data["db_user"].telegram_id
        # visible from another connection already
        async with db.session() as other:
            seen["stored_id"] = await other.scalar(select(User.id).where(User.telegram_id == 777))
        return "ok"

    assert await DbSessionMiddleware(db)(handler, _event(777), {}) == "ok"

    assert seen["in_transaction"] is False
    assert seen["db_user_tg"] == 777
    assert seen["stored_id"] is not None


async def test_handler_writes_are_committed_after_return(db):
    async def handler(event, data):
        data["db_user"].username = "renamed"
        return None

    await DbSessionMiddleware(db)(handler, _event(778), {})

    async with db.session() as s:
        assert await s.scalar(select(User.username).where(User.telegram_id == 778)) == "renamed"


async def test_handler_error_rolls_back_its_writes(db):
    async def handler(event, data):
        data["db_user"].username = "lost"
        await data["session"].flush()
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await DbSessionMiddleware(db)(handler, _event(779, username="kept"), {})

    async with db.session() as s:
        assert await s.scalar(select(User.username).where(User.telegram_id == 779)) == "kept"
