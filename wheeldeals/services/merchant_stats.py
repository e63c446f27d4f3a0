# wheeldeals/services/merchant_stats.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import Merchant, SpinStatus
from wheeldeals.database.repo import stats_repo
from wheeldeals.utils.dates import last_n_days


def money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


@dataclass(frozen=True, slots=True)
class MerchantDashboard:
    merchant_id: str
    merchant_name: str
    today: date
    spins_today: int
    spins_window: int
    window_days: int
    redeem_rate_window: float

    @property
    def revenue_today(self) -> Decimal:
        return self.spins_today * MerchantStatsService.PRICE_PER_SPIN

    @property
    def revenue_window(self) -> Decimal:
        return self.spins_window * MerchantStatsService.PRICE_PER_SPIN

    @property
    def payout_today(self) -> Decimal:
        return self.spins_today * MerchantStatsService.PAYOUT_PER_SPIN

    @property
    def payout_window(self) -> Decimal:
        return self.spins_window * MerchantStatsService.PAYOUT_PER_SPIN


class MerchantStatsService:
    # Display-only estimates, no money moves
    PRICE_PER_SPIN = Decimal("1.00")
    PAYOUT_PER_SPIN = Decimal("0.70")

    WINDOW_DAYS = 7

    @staticmethod
    async def redeem_rate(session: AsyncSession, *, merchant_id: str, days: list[date]) -> float:
        """
        redeemed / issued over the given days (0.0 when nothing was issued).
        """
        issued = await stats_repo.count_spins(session, merchant_id=merchant_id, days=days)
        if not issued:
            return 0.0
        redeemed = await stats_repo.count_spins(
            session,
            merchant_id=merchant_id,
            days=days,
            status=SpinStatus.REDEEMED,
        )
        return redeemed / issued

    @staticmethod
    async def dashboard(session: AsyncSession, *, merchant: Merchant, today: date) -> MerchantDashboard:
        days = last_n_days(today, MerchantStatsService.WINDOW_DAYS)
        per_day = await stats_repo.get_merchant_days(session, merchant_id=merchant.id, days=days)

        return MerchantDashboard(
            merchant_id=merchant.id,
            merchant_name=merchant.name,
            today=today,
            spins_today=per_day.get(today, 0),
            spins_window=sum(per_day.values()),
            window_days=len(days),
            redeem_rate_window=await MerchantStatsService.redeem_rate(
                session,
                merchant_id=merchant.id,
                days=days,
            ),
        )
