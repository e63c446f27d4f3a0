# wheeldeals/services/redeem.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from wheeldeals.database.models import Spin, SpinStatus
from wheeldeals.database.tx import transactional
from wheeldeals.services.codes import normalize_code
from wheeldeals.services.errors import AlreadyRedeemed, Expired, NotFound, StorageUnavailable
from wheeldeals.utils.dates import utc_now_naive

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RedeemResult:
    code: str
    prize_label: str
    merchant_id: str
    redeemed_at: datetime


class RedeemService:
    @staticmethod
    async def redeem_by_code(
        session: AsyncSession,
        code: str,
        *,
        merchant_id: str | None = None,
        redeemed_by_user_id: int | None = None,
        now: datetime | None = None,
    ) -> RedeemResult:
        """
        Marks an issued, unexpired code as redeemed, exactly once.

        The transition is a conditional UPDATE (status must still be `issued`),
        so of two concurrent attempts only one changes the row; the other
        re-reads it and gets AlreadyRedeemed.

        merchant_id scopes the lookup: codes of other merchants are NotFound.
        """
        cleaned = normalize_code(code)
        if not cleaned:
            raise NotFound(cleaned)

        now = now or utc_now_naive()

        try:
            async with transactional(session, write=True):
                conds = [
                    Spin.code == cleaned,
                    Spin.status == SpinStatus.ISSUED,
                    Spin.expires_at >= now,
                ]
                if merchant_id is not None:
                    conds.append(Spin.merchant_id == merchant_id)

                res = await session.execute(
                    update(Spin)
                    .where(*conds)
                    .values(
                        status=SpinStatus.REDEEMED,
                        redeemed_at=now,
                        redeemed_by_user_id=redeemed_by_user_id,
                    )
                    .execution_options(synchronize_session=False)
                )
                changed = (res.rowcount or 0) > 0

                spin = await session.scalar(
                    select(Spin)
                    .where(Spin.code == cleaned)
                    .execution_options(populate_existing=True)
                )
        except (OperationalError, InterfaceError) as e:
            raise StorageUnavailable("Redemption could not be saved") from e

        if spin is None or (merchant_id is not None and spin.merchant_id != merchant_id):
            raise NotFound(cleaned)

        if changed:
            log.info("Code redeemed code=%s merchant=%s prize=%r", cleaned, spin.merchant_id, spin.prize_label)
            return RedeemResult(
                code=cleaned,
                prize_label=spin.prize_label,
                merchant_id=spin.merchant_id,
                redeemed_at=now,
            )

        # lost the compare-and-set: classify from the stored row
        if spin.status == SpinStatus.REDEEMED:
            raise AlreadyRedeemed(cleaned)
        if now > spin.expires_at:
            raise Expired(cleaned)
        raise AlreadyRedeemed(cleaned)

    @staticmethod
    async def lookup(session: AsyncSession, code: str) -> Spin | None:
        """
        Read-only lookup by (normalized) code.
        """
        cleaned = normalize_code(code)
        if not cleaned:
            return None
        return await session.scalar(select(Spin).where(Spin.code == cleaned))
