# wheeldeals/scripts/seed_demo_merchant.py
from __future__ import annotations

import asyncio
import sys

from wheeldeals.config import Settings
from wheeldeals.database.models import Merchant
from wheeldeals.database.repo import merchants_repo
from wheeldeals.database.session import Database
from wheeldeals.database.tx import transactional
from wheeldeals.services.auth import AuthService
from wheeldeals.services.prizes import DEFAULT_WHEEL

DEMO_MERCHANT_ID = "demo-pizza"


async def main(staff_telegram_id: int | None) -> None:
    settings = Settings.load()
    db = Database(settings.database_url)
    await db.init_models()

    async with db.session() as session, transactional(session, write=True):
        merchant = await merchants_repo.get_merchant(session, DEMO_MERCHANT_ID)
        if merchant is None:
            merchant = Merchant(
                id=DEMO_MERCHANT_ID,
                name="Demo Pizza",
                category="pizza",
                city="las vegas",
                active=True,
            )
            session.add(merchant)
            await session.flush()

        await merchants_repo.set_wheel(session, merchant.id, DEFAULT_WHEEL)

        if staff_telegram_id is not None:
            await AuthService(settings).grant_staff(
                session,
                merchant_id=merchant.id,
                telegram_id=staff_telegram_id,
            )

    await db.close()
    print(f"Seeded merchant {DEMO_MERCHANT_ID!r}" + (f" with staff {staff_telegram_id}" if staff_telegram_id else ""))


if __name__ == "__main__":
    arg = sys.argv[1] if len(sys.argv) > 1 else None
    asyncio.run(main(int(arg) if arg else None))
