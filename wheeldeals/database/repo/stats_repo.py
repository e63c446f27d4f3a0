# wheeldeals/database/repo/stats_repo.py
from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import MerchantDailyStats, Spin, SpinStatus, UserMerchantDailyStats
from wheeldeals.database.tx import dialect_insert


# ------------------------
# Writes (spin issuance only)
# ------------------------

async def bump_merchant_daily(session: AsyncSession, *, merchant_id: str, day: date) -> None:
    stmt = dialect_insert(session, MerchantDailyStats).values(
        merchant_id=merchant_id,
        day=day,
        spins_count=1,
    ).on_conflict_do_update(
        index_elements=["merchant_id", "day"],
        set_={
            "spins_count": MerchantDailyStats.spins_count + 1,
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)


async def bump_user_merchant_daily(
    session: AsyncSession,
    *,
    user_id: int,
    merchant_id: str,
    day: date,
) -> None:
    stmt = dialect_insert(session, UserMerchantDailyStats).values(
        user_id=user_id,
        merchant_id=merchant_id,
        day=day,
        spins_count=1,
    ).on_conflict_do_update(
        index_elements=["user_id", "merchant_id", "day"],
        set_={
            "spins_count": UserMerchantDailyStats.spins_count + 1,
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)


# ------------------------
# Reads
# ------------------------

async def get_merchant_daily(session: AsyncSession, *, merchant_id: str, day: date) -> int:
    count = await session.scalar(
        select(MerchantDailyStats.spins_count).where(
            MerchantDailyStats.merchant_id == merchant_id,
            MerchantDailyStats.day == day,
        )
    )
    return int(count or 0)


async def get_merchant_days(
    session: AsyncSession,
    *,
    merchant_id: str,
    days: Iterable[date],
) -> dict[date, int]:
    """
    spins_count per requested day; days without a row map to 0.
    """
    wanted = list(days)
    out = {d: 0 for d in wanted}
    if not wanted:
        return out

    res = await session.execute(
        select(MerchantDailyStats.day, MerchantDailyStats.spins_count).where(
            MerchantDailyStats.merchant_id == merchant_id,
            MerchantDailyStats.day.in_(wanted),
        )
    )
    for day, count in res.all():
        out[day] = int(count or 0)
    return out


async def get_user_merchant_daily(
    session: AsyncSession,
    *,
    user_id: int,
    merchant_id: str,
    day: date,
) -> int:
    count = await session.scalar(
        select(UserMerchantDailyStats.spins_count).where(
            UserMerchantDailyStats.user_id == user_id,
            UserMerchantDailyStats.merchant_id == merchant_id,
            UserMerchantDailyStats.day == day,
        )
    )
    return int(count or 0)


async def count_spins(
    session: AsyncSession,
    *,
    merchant_id: str,
    days: Iterable[date],
    status: SpinStatus | None = None,
) -> int:
    """
    Counts ledger rows (not aggregates) for a merchant over the given days.
    """
    wanted = list(days)
    if not wanted:
        return 0

    q = select(func.count(Spin.id)).where(
        Spin.merchant_id == merchant_id,
        Spin.day.in_(wanted),
    )
    if status is not None:
        q = q.where(Spin.status == status)
    return int(await session.scalar(q) or 0)
