# wheeldeals/database/models/spin.py
from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from wheeldeals.database.base import Base


class SpinStatus(str, enum.Enum):
    ISSUED = "issued"
    REDEEMED = "redeemed"


class SpinQuota(Base):
    """
    Spins left for one user at one merchant on one local day.
    Created lazily on the first spin of the day, never deleted.
    """
    __tablename__ = "spin_quotas"
    __table_args__ = (
        UniqueConstraint("user_id", "merchant_id", "day", name="uq_spin_quota_user_merchant_day"),
        CheckConstraint("remaining >= 0", name="ck_spin_quota_remaining_nonneg"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)
    day: Mapped[date] = mapped_column(Date, index=True)

    remaining: Mapped[int] = mapped_column(Integer)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )


class Spin(Base):
    """
    Ledger of issued rewards. Source of truth for redemption status.
    issued -> redeemed happens at most once; expiry is checked at redeem time only.
    """
    __tablename__ = "spins"
    __table_args__ = (
        Index("ix_spins_merchant_day_status", "merchant_id", "day", "status"),
        Index("ix_spins_user_merchant_day", "user_id", "merchant_id", "day"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)

    prize_label: Mapped[str] = mapped_column(String(64))
    code: Mapped[str] = mapped_column(String(16), unique=True, index=True)

    status: Mapped[SpinStatus] = mapped_column(
        Enum(SpinStatus, native_enum=False),
        default=SpinStatus.ISSUED,
        index=True,
    )

    # local day key (reporting + quota)
    day: Mapped[date] = mapped_column(Date, index=True)

    # naive UTC
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    redeemed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    redeemed_by_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
