# wheeldeals/services/auth.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.config import Settings
from wheeldeals.database.models import Merchant, MerchantStaff, User
from wheeldeals.database.repo import merchants_repo
from wheeldeals.database.repo.users import get_or_create_user


@dataclass(frozen=True, slots=True)
class AuthResult:
    merchant: Merchant | None  # merchant the user may redeem for / report on

    @property
    def is_staff(self) -> bool:
        return self.merchant is not None


class AuthService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def resolve(self, session: AsyncSession, user: User) -> AuthResult:
        merchant = await merchants_repo.find_merchant_for_staff(session, user.id)
        return AuthResult(merchant=merchant)

    def is_root(self, telegram_id: int) -> bool:
        return telegram_id in self.settings.root_admin_ids

    async def grant_staff(
        self,
        session: AsyncSession,
        *,
        merchant_id: str,
        telegram_id: int,
    ) -> MerchantStaff:
        """
        Makes the Telegram user active staff of the merchant (re-activates if present).
        """
        user = await get_or_create_user(session, telegram_id=telegram_id)

        staff = await session.scalar(
            select(MerchantStaff).where(
                MerchantStaff.merchant_id == merchant_id,
                MerchantStaff.user_id == user.id,
            )
        )
        if staff is None:
            staff = MerchantStaff(merchant_id=merchant_id, user_id=user.id, active=True)
            session.add(staff)
        else:
            staff.active = True

        await session.flush()
        return staff

    async def revoke_staff(self, session: AsyncSession, *, merchant_id: str, telegram_id: int) -> bool:
        staff = await session.scalar(
            select(MerchantStaff)
            .join(User, User.id == MerchantStaff.user_id)
            .where(
                MerchantStaff.merchant_id == merchant_id,
                User.telegram_id == telegram_id,
                MerchantStaff.active.is_(True),
            )
        )
        if staff is None:
            return False
        staff.active = False
        await session.flush()
        return True
