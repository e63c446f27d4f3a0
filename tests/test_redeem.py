import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from wheeldeals.database.models import SpinStatus
from wheeldeals.services import redeem as redeem_module
from wheeldeals.services.errors import AlreadyRedeemed, Expired, NotFound, StorageUnavailable
from wheeldeals.services.redeem import RedeemResult, RedeemService
from wheeldeals.services.spin import SpinService

ISSUED_AT = datetime(2026, 3, 14, 12, 0)


async def _issue(db, ids, *, now=ISSUED_AT, merchant_id=None, prize_label="BOGO") -> str:
    async with db.session() as s:
        res = await SpinService.issue_spin(
            s,
            user_id=ids.user_id,
            merchant_id=merchant_id or ids.merchant_id,
            prize_label=prize_label,
            day=ids.today,
            now=now,
        )
    return res.code


async def _redeem(db, code, **kwargs) -> RedeemResult:
    async with db.session() as s:
        return await RedeemService.redeem_by_code(s, code, **kwargs)


async def _status(db, code) -> SpinStatus:
    async with db.session() as s:
        spin = await RedeemService.lookup(s, code)
    return spin.status


async def test_issue_then_redeem_once(db, seeded):
    code = await _issue(db, seeded, prize_label="20% OFF")

    res = await _redeem(db, code, now=ISSUED_AT + timedelta(hours=1))
    assert res.prize_label == "20% OFF"
    assert res.merchant_id == seeded.merchant_id
    assert await _status(db, code) == SpinStatus.REDEEMED

    with pytest.raises(AlreadyRedeemed):
        await _redeem(db, code, now=ISSUED_AT + timedelta(hours=2))


async def test_redeem_records_timestamp_and_staff(db, seeded):
    code = await _issue(db, seeded)
    at = ISSUED_AT + timedelta(days=1)

    await _redeem(db, code, now=at, redeemed_by_user_id=seeded.other_user_id)

    async with db.session() as s:
        spin = await RedeemService.lookup(s, code)
    assert spin.redeemed_at == at
    assert spin.redeemed_by_user_id == seeded.other_user_id


async def test_expired_code_stays_issued(db, seeded):
    code = await _issue(db, seeded)

    with pytest.raises(Expired):
        await _redeem(db, code, now=ISSUED_AT + timedelta(days=8))

    assert await _status(db, code) == SpinStatus.ISSUED


async def test_redeem_at_exact_expiry_is_allowed(db, seeded):
    code = await _issue(db, seeded)
    res = await _redeem(db, code, now=ISSUED_AT + timedelta(days=7))
    assert res.code == code


async def test_already_redeemed_wins_over_expired(db, seeded):
    code = await _issue(db, seeded)
    await _redeem(db, code, now=ISSUED_AT + timedelta(days=1))

    with pytest.raises(AlreadyRedeemed):
        await _redeem(db, code, now=ISSUED_AT + timedelta(days=30))


async def test_code_is_normalized(db, seeded):
    code = await _issue(db, seeded)
    messy = f"  {code.lower()}  "

    res = await _redeem(db, messy, now=ISSUED_AT)
    assert res.code == code

    with pytest.raises(AlreadyRedeemed):
        await _redeem(db, code, now=ISSUED_AT)


async def test_lowercase_and_uppercase_lookups_match(db, seeded):
    code = await _issue(db, seeded)
    async with db.session() as s:
        a = await RedeemService.lookup(s, f"  {code.lower()}  ")
        b = await RedeemService.lookup(s, code)
    assert a.id == b.id


@pytest.mark.parametrize("raw", ["WD-ZZZZZZ", "", "   "])
async def test_unknown_code_not_found(db, seeded, raw):
    with pytest.raises(NotFound):
        await _redeem(db, raw)


async def test_code_of_other_merchant_not_found_and_untouched(db, seeded):
    code = await _issue(db, seeded, merchant_id=seeded.other_merchant_id)

    with pytest.raises(NotFound):
        await _redeem(db, code, merchant_id=seeded.merchant_id, now=ISSUED_AT)
    assert await _status(db, code) == SpinStatus.ISSUED

    res = await _redeem(db, code, merchant_id=seeded.other_merchant_id, now=ISSUED_AT)
    assert res.merchant_id == seeded.other_merchant_id


async def test_concurrent_redemptions_one_wins(db, seeded):
    code = await _issue(db, seeded)

    results = await asyncio.gather(
        _redeem(db, code, now=ISSUED_AT),
        _redeem(db, code, now=ISSUED_AT),
        return_exceptions=True,
    )

    assert sum(isinstance(r, RedeemResult) for r in results) == 1
    assert sum(isinstance(r, AlreadyRedeemed) for r in results) == 1
    assert await _status(db, code) == SpinStatus.REDEEMED


async def test_storage_failure_leaves_code_issued(db, seeded, monkeypatch):
    code = await _issue(db, seeded)

    def failing_update(*args, **kwargs):
        raise OperationalError("UPDATE spins", {}, Exception("database is locked"))

    monkeypatch.setattr(redeem_module, "update", failing_update)

    with pytest.raises(StorageUnavailable):
        await _redeem(db, code, now=ISSUED_AT + timedelta(hours=1))

    monkeypatch.undo()
    assert await _status(db, code) == SpinStatus.ISSUED
    res = await _redeem(db, code, now=ISSUED_AT + timedelta(hours=2))
    assert res.code == code
