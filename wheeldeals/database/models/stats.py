# wheeldeals/database/models/stats.py
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from wheeldeals.database.base import Base


class MerchantDailyStats(Base):
    """
    One row per merchant per local day. spins_count == issued spins that day.
    Only incremented by spin issuance, in the same transaction as the spin row.
    """
    __tablename__ = "merchant_daily_stats"
    __table_args__ = (
        UniqueConstraint("merchant_id", "day", name="uq_merchant_daily_stats_merchant_day"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)
    day: Mapped[date] = mapped_column(Date, index=True)

    spins_count: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )


class UserMerchantDailyStats(Base):
    __tablename__ = "user_merchant_daily_stats"
    __table_args__ = (
        UniqueConstraint("user_id", "merchant_id", "day", name="uq_user_merchant_daily_stats_key"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)
    day: Mapped[date] = mapped_column(Date, index=True)

    spins_count: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )
