# wheeldeals/utils/dates.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def utc_now_naive() -> datetime:
    # store in DB as naive UTC (timezone=False columns)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_key(d: date) -> str:
    """YYYY-MM-DD, as shown to users and merchants."""
    return d.isoformat()


def last_n_days(today: date, n: int) -> list[date]:
    """
    today, today-1, ... (n days, newest first).
    """
    return [today - timedelta(days=i) for i in range(n)]


@dataclass(frozen=True, slots=True)
class TimeProvider:
    timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)

    def today(self) -> date:
        return self.now().date()

    def yesterday(self) -> date:
        return self.today() - timedelta(days=1)
