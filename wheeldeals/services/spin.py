# wheeldeals/services/spin.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from random import Random

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import Spin, SpinStatus
from wheeldeals.database.repo import merchants_repo, quota_repo, stats_repo
from wheeldeals.database.tx import transactional
from wheeldeals.services.codes import generate_code
from wheeldeals.services.errors import (
    CodeAllocationFailed,
    InvalidInput,
    QuotaExceeded,
    StorageUnavailable,
    UnknownMerchant,
)
from wheeldeals.services.prizes import pick_prize
from wheeldeals.utils.dates import utc_now_naive

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssuedSpin:
    code: str
    remaining_after: int
    prize_label: str
    merchant_id: str
    day: date
    expires_at: datetime


class SpinService:
    DEFAULT_DAILY_LIMIT = 3
    CODE_TTL_DAYS = 7

    # fresh codes tried before giving up on collisions
    CODE_ATTEMPTS = 5

    @staticmethod
    async def issue_spin(
        session: AsyncSession,
        *,
        user_id: int,
        merchant_id: str,
        prize_label: str,
        day: date,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        ttl_days: int = CODE_TTL_DAYS,
        now: datetime | None = None,
        rng: Random | None = None,
    ) -> IssuedSpin:
        """
        Consumes one unit of today's quota and issues a redeemable code.

        Quota row (lazily created), spin row and both daily aggregates are
        written in one transaction: either all of them land or none do.
        Raises QuotaExceeded when nothing is left for (user, merchant, day).
        """
        if daily_limit < 1:
            raise InvalidInput(f"daily_limit must be >= 1, got {daily_limit}")
        label = (prize_label or "").strip()
        if not label:
            raise InvalidInput("prize_label is empty")

        now = now or utc_now_naive()
        expires_at = now + timedelta(days=ttl_days)

        try:
            async with transactional(session, write=True):
                # 1) Lazy init at daily_limit (no-op when the row exists)
                await quota_repo.ensure_quota_row(
                    session,
                    user_id=user_id,
                    merchant_id=merchant_id,
                    day=day,
                    daily_limit=daily_limit,
                )

                # 2) Conditional decrement; 0 rows => nothing left
                remaining_after = await quota_repo.take_one(
                    session,
                    user_id=user_id,
                    merchant_id=merchant_id,
                    day=day,
                )
                if remaining_after is None:
                    raise QuotaExceeded(user_id=user_id, merchant_id=merchant_id, daily_limit=daily_limit)

                # 3) Ledger row with a unique code
                code = await SpinService._insert_spin(
                    session,
                    user_id=user_id,
                    merchant_id=merchant_id,
                    prize_label=label,
                    day=day,
                    now=now,
                    expires_at=expires_at,
                    rng=rng,
                )

                # 4) Aggregates
                await stats_repo.bump_merchant_daily(session, merchant_id=merchant_id, day=day)
                await stats_repo.bump_user_merchant_daily(
                    session,
                    user_id=user_id,
                    merchant_id=merchant_id,
                    day=day,
                )
        except QuotaExceeded:
            log.debug("Quota exhausted user=%s merchant=%s day=%s", user_id, merchant_id, day)
            raise
        except IntegrityError as e:
            # FK violation: unknown user or merchant
            raise InvalidInput(f"Unknown user {user_id} or merchant {merchant_id!r}") from e
        except (OperationalError, InterfaceError) as e:
            raise StorageUnavailable("Spin could not be saved") from e

        log.info(
            "Spin issued user=%s merchant=%s prize=%r code=%s left=%s",
            user_id, merchant_id, label, code, remaining_after,
        )
        return IssuedSpin(
            code=code,
            remaining_after=remaining_after,
            prize_label=label,
            merchant_id=merchant_id,
            day=day,
            expires_at=expires_at,
        )

    @staticmethod
    async def _insert_spin(
        session: AsyncSession,
        *,
        user_id: int,
        merchant_id: str,
        prize_label: str,
        day: date,
        now: datetime,
        expires_at: datetime,
        rng: Random | None,
    ) -> str:
        for _ in range(SpinService.CODE_ATTEMPTS):
            code = generate_code(rng)
            try:
                # SAVEPOINT so a code collision doesn't roll back the quota decrement
                async with session.begin_nested():
                    session.add(
                        Spin(
                            user_id=user_id,
                            merchant_id=merchant_id,
                            prize_label=prize_label,
                            code=code,
                            status=SpinStatus.ISSUED,
                            day=day,
                            created_at=now,
                            expires_at=expires_at,
                        )
                    )
            except IntegrityError:
                log.warning("Redemption code collision on %s, retrying", code)
                continue
            return code

        raise CodeAllocationFailed(f"No unique code after {SpinService.CODE_ATTEMPTS} attempts")

    @staticmethod
    async def spin(
        session: AsyncSession,
        *,
        user_id: int,
        merchant_id: str,
        day: date,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        ttl_days: int = CODE_TTL_DAYS,
        now: datetime | None = None,
        rng: Random | None = None,
    ) -> IssuedSpin:
        """
        Full spin: draw from the merchant's wheel, then issue the reward.

        Merchant and wheel are read inside the same write transaction as the
        issuance; the whole spin is committed when this returns on a fresh session.
        """
        try:
            async with transactional(session, write=True):
                merchant = await merchants_repo.get_merchant(session, merchant_id)
                if merchant is None or not merchant.active:
                    raise UnknownMerchant(merchant_id)

                wheel = await merchants_repo.get_wheel(session, merchant_id)
                prize = pick_prize(wheel, rng)

                return await SpinService.issue_spin(
                    session,
                    user_id=user_id,
                    merchant_id=merchant_id,
                    prize_label=prize.label,
                    day=day,
                    daily_limit=daily_limit,
                    ttl_days=ttl_days,
                    now=now,
                    rng=rng,
                )
        except (OperationalError, InterfaceError) as e:
            raise StorageUnavailable("Spin could not be saved") from e

    @staticmethod
    async def remaining_today(
        session: AsyncSession,
        *,
        user_id: int,
        merchant_id: str,
        day: date,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
    ) -> int:
        return await quota_repo.get_remaining(
            session,
            user_id=user_id,
            merchant_id=merchant_id,
            day=day,
            daily_limit=daily_limit,
        )
