# wheeldeals/database/repo/quota_repo.py
from __future__ import annotations

from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import SpinQuota
from wheeldeals.database.tx import dialect_insert


async def ensure_quota_row(
    session: AsyncSession,
    *,
    user_id: int,
    merchant_id: str,
    day: date,
    daily_limit: int,
) -> None:
    """
    Creates the (user, merchant, day) row at daily_limit if it does not exist yet.
    An existing row is left untouched.
    """
    stmt = dialect_insert(session, SpinQuota).values(
        user_id=user_id,
        merchant_id=merchant_id,
        day=day,
        remaining=daily_limit,
    ).on_conflict_do_nothing(
        index_elements=["user_id", "merchant_id", "day"],
    )
    await session.execute(stmt)


async def take_one(
    session: AsyncSession,
    *,
    user_id: int,
    merchant_id: str,
    day: date,
) -> int | None:
    """
    Decrements remaining only if it is still > 0.
    Returns the remaining count after the decrement, or None when nothing was left.
    """
    stmt = (
        update(SpinQuota)
        .where(
            SpinQuota.user_id == user_id,
            SpinQuota.merchant_id == merchant_id,
            SpinQuota.day == day,
            SpinQuota.remaining > 0,
        )
        .values(remaining=SpinQuota.remaining - 1, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    if (res.rowcount or 0) == 0:
        return None

    remaining = await session.scalar(
        select(SpinQuota.remaining).where(
            SpinQuota.user_id == user_id,
            SpinQuota.merchant_id == merchant_id,
            SpinQuota.day == day,
        )
    )
    return int(remaining)


async def get_remaining(
    session: AsyncSession,
    *,
    user_id: int,
    merchant_id: str,
    day: date,
    daily_limit: int,
) -> int:
    """
    Spins left today. No row yet means the full daily limit.
    """
    remaining = await session.scalar(
        select(SpinQuota.remaining).where(
            SpinQuota.user_id == user_id,
            SpinQuota.merchant_id == merchant_id,
            SpinQuota.day == day,
        )
    )
    if remaining is None:
        return daily_limit
    return int(remaining)
