# tests/conftest.py
from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from wheeldeals.database.models import Merchant, User
from wheeldeals.database.session import Database

TODAY = date(2026, 3, 14)


@pytest.fixture
async def db(tmp_path):
    # file-backed so concurrent sessions see the same data
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'wheeldeals.db'}")
    await database.init_models()
    yield database
    await database.close()


@pytest.fixture
async def seeded(db):
    async with db.session() as s:
        alice = User(telegram_id=1001, username="alice")
        bob = User(telegram_id=1002, username="bob")
        s.add_all(
            [
                Merchant(id="demo-pizza", name="Demo Pizza", active=True),
                Merchant(id="taco-town", name="Taco Town", active=True),
                Merchant(id="closed-cafe", name="Closed Cafe", active=False),
                alice,
                bob,
            ]
        )
        await s.commit()

    return SimpleNamespace(
        merchant_id="demo-pizza",
        other_merchant_id="taco-town",
        inactive_merchant_id="closed-cafe",
        user_id=alice.id,
        other_user_id=bob.id,
        today=TODAY,
    )
