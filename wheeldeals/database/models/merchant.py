# wheeldeals/database/models/merchant.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Float,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wheeldeals.database.base import Base

if TYPE_CHECKING:
    from wheeldeals.database.models.user import User


class Merchant(Base):
    __tablename__ = "merchants"

    # short slug, e.g. "demo-pizza"; must fit in callback_data
    id: Mapped[str] = mapped_column(String(48), primary_key=True)
    name: Mapped[str] = mapped_column(String(128))

    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    wheel: Mapped[list["WheelOption"]] = relationship(
        back_populates="merchant",
        order_by="WheelOption.position",
        cascade="all, delete-orphan",
    )
    staff: Mapped[list["MerchantStaff"]] = relationship(
        back_populates="merchant",
        cascade="all, delete-orphan",
    )


class WheelOption(Base):
    """
    One wheel slice. Order matters: the prize selector walks slices by position.
    """
    __tablename__ = "wheel_options"
    __table_args__ = (
        UniqueConstraint("merchant_id", "position", name="uq_wheel_option_merchant_pos"),
        CheckConstraint("weight >= 0", name="ck_wheel_option_weight_nonneg"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)

    position: Mapped[int] = mapped_column(Integer)
    label: Mapped[str] = mapped_column(String(64))
    weight: Mapped[float] = mapped_column(Float)

    merchant: Mapped["Merchant"] = relationship(back_populates="wheel")


class MerchantStaff(Base):
    """
    Authorizes a user to redeem codes and read the dashboard of one merchant.
    """
    __tablename__ = "merchant_staff"
    __table_args__ = (UniqueConstraint("merchant_id", "user_id", name="uq_merchant_staff_merchant_user"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    merchant_id: Mapped[str] = mapped_column(ForeignKey("merchants.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    merchant: Mapped["Merchant"] = relationship(back_populates="staff")
    user: Mapped["User"] = relationship(back_populates="staff_roles")
