from datetime import date, timedelta
from decimal import Decimal

from wheeldeals.config.settings import Settings
from wheeldeals.database.repo import merchants_repo, stats_repo
from wheeldeals.scheduler.jobs import build_daily_digests
from wheeldeals.services.auth import AuthService
from wheeldeals.services.merchant_stats import MerchantStatsService, money
from wheeldeals.services.redeem import RedeemService
from wheeldeals.services.spin import SpinService
from wheeldeals.utils.dates import last_n_days

SETTINGS = Settings(bot_token="test-token", root_admin_ids=(1,))


async def _issue(db, *, user_id, merchant_id, day) -> str:
    async with db.session() as s:
        res = await SpinService.issue_spin(
            s,
            user_id=user_id,
            merchant_id=merchant_id,
            prize_label="BOGO",
            day=day,
        )
    return res.code


def test_last_n_days_newest_first():
    assert last_n_days(date(2026, 3, 1), 3) == [date(2026, 3, 1), date(2026, 2, 28), date(2026, 2, 27)]


def test_money():
    assert money(Decimal("3.5")) == "$3.50"
    assert money(Decimal("1234")) == "$1,234.00"


async def test_dashboard_numbers(db, seeded):
    today = seeded.today
    codes_today = [
        await _issue(db, user_id=seeded.user_id, merchant_id=seeded.merchant_id, day=today) for _ in range(3)
    ]
    for _ in range(2):
        await _issue(db, user_id=seeded.other_user_id, merchant_id=seeded.merchant_id, day=today - timedelta(days=1))
    # outside the 7-day window
    await _issue(db, user_id=seeded.other_user_id, merchant_id=seeded.merchant_id, day=today - timedelta(days=7))
    # other merchant
    await _issue(db, user_id=seeded.user_id, merchant_id=seeded.other_merchant_id, day=today)

    async with db.session() as s:
        await RedeemService.redeem_by_code(s, codes_today[0])

    async with db.session() as s:
        merchant = await merchants_repo.get_merchant(s, seeded.merchant_id)
        d = await MerchantStatsService.dashboard(s, merchant=merchant, today=today)

    assert d.merchant_name == "Demo Pizza"
    assert d.spins_today == 3
    assert d.spins_window == 5
    assert d.window_days == 7
    assert d.revenue_today == Decimal("3.00")
    assert d.payout_today == Decimal("2.10")
    assert d.revenue_window == Decimal("5.00")
    assert d.payout_window == Decimal("3.50")
    assert d.redeem_rate_window == 0.2


async def test_dashboard_empty_merchant(db, seeded):
    async with db.session() as s:
        merchant = await merchants_repo.get_merchant(s, seeded.other_merchant_id)
        d = await MerchantStatsService.dashboard(s, merchant=merchant, today=seeded.today)

    assert (d.spins_today, d.spins_window, d.redeem_rate_window) == (0, 0, 0.0)
    assert d.payout_window == Decimal("0")


async def test_merchant_days_fill_missing_with_zero(db, seeded):
    day = seeded.today
    await _issue(db, user_id=seeded.user_id, merchant_id=seeded.merchant_id, day=day)

    async with db.session() as s:
        per_day = await stats_repo.get_merchant_days(
            s, merchant_id=seeded.merchant_id, days=[day, day - timedelta(days=1)]
        )
    assert per_day == {day: 1, day - timedelta(days=1): 0}


async def test_staff_resolution_and_revocation(db, seeded):
    auth = AuthService(SETTINGS)

    async with db.session() as s:
        await auth.grant_staff(s, merchant_id=seeded.merchant_id, telegram_id=1002)
        await s.commit()

    async with db.session() as s:
        merchant = await merchants_repo.find_merchant_for_staff(s, seeded.other_user_id)
        assert merchant.id == seeded.merchant_id
        assert await merchants_repo.find_merchant_for_staff(s, seeded.user_id) is None

        assert await auth.revoke_staff(s, merchant_id=seeded.merchant_id, telegram_id=1002) is True
        await s.commit()

    async with db.session() as s:
        assert await merchants_repo.find_merchant_for_staff(s, seeded.other_user_id) is None


async def test_daily_digest_goes_to_active_staff(db, seeded):
    day = seeded.today
    async with db.session() as s:
        await AuthService(SETTINGS).grant_staff(s, merchant_id=seeded.merchant_id, telegram_id=1002)
        await AuthService(SETTINGS).grant_staff(s, merchant_id=seeded.inactive_merchant_id, telegram_id=1001)
        await s.commit()

    for _ in range(2):
        await _issue(db, user_id=seeded.user_id, merchant_id=seeded.merchant_id, day=day)

    async with db.session() as s:
        digests = await build_daily_digests(s, day)

    assert [d.chat_id for d in digests] == [1002]
    assert "Spins: <b>2</b>" in digests[0].text
    assert "$1.40" in digests[0].text
