# wheeldeals/database/repo/merchants_repo.py
from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import Merchant, MerchantStaff, User, WheelOption
from wheeldeals.services.prizes import DEFAULT_WHEEL, PrizeOption


async def get_merchant(session: AsyncSession, merchant_id: str) -> Merchant | None:
    return await session.get(Merchant, merchant_id)


async def list_active_merchants(session: AsyncSession) -> list[Merchant]:
    res = await session.execute(
        select(Merchant).where(Merchant.active.is_(True)).order_by(Merchant.name.asc(), Merchant.id.asc())
    )
    return list(res.scalars().all())


async def get_wheel(session: AsyncSession, merchant_id: str) -> list[PrizeOption]:
    """
    Merchant's wheel in slice order; the default wheel when none is configured.
    """
    res = await session.execute(
        select(WheelOption.label, WheelOption.weight)
        .where(WheelOption.merchant_id == merchant_id)
        .order_by(WheelOption.position.asc())
    )
    rows = res.all()
    if not rows:
        return list(DEFAULT_WHEEL)
    return [PrizeOption(label=label, weight=weight) for label, weight in rows]


async def set_wheel(session: AsyncSession, merchant_id: str, options: Sequence[PrizeOption]) -> None:
    """
    Replaces the merchant's wheel; positions follow the given order.
    """
    await session.execute(delete(WheelOption).where(WheelOption.merchant_id == merchant_id))
    session.add_all(
        [
            WheelOption(merchant_id=merchant_id, position=i, label=o.label, weight=float(o.weight))
            for i, o in enumerate(options)
        ]
    )
    await session.flush()


async def find_merchant_for_staff(session: AsyncSession, user_id: int) -> Merchant | None:
    """
    Active merchant the user is active staff of (first by id if several).
    """
    res = await session.execute(
        select(Merchant)
        .join(MerchantStaff, MerchantStaff.merchant_id == Merchant.id)
        .where(
            MerchantStaff.user_id == user_id,
            MerchantStaff.active.is_(True),
            Merchant.active.is_(True),
        )
        .order_by(Merchant.id.asc())
        .limit(1)
    )
    return res.scalar_one_or_none()


async def list_staff_telegram_ids(session: AsyncSession, merchant_id: str) -> list[int]:
    res = await session.execute(
        select(User.telegram_id)
        .join(MerchantStaff, MerchantStaff.user_id == User.id)
        .where(
            MerchantStaff.merchant_id == merchant_id,
            MerchantStaff.active.is_(True),
        )
        .order_by(User.telegram_id.asc())
    )
    return [int(tg_id) for (tg_id,) in res.all()]
