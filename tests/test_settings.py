import pytest

from wheeldeals.config.settings import Settings
from wheeldeals.utils.dates import TimeProvider


def test_defaults():
    s = Settings.load({"BOT_TOKEN": "abc"})
    assert s.bot_token == "abc"
    assert s.database_url == "sqlite+aiosqlite:///./wheeldeals.db"
    assert s.daily_spin_limit == 3
    assert s.code_ttl_days == 7
    assert s.timezone == "UTC"
    assert s.is_dev is False


def test_overrides():
    s = Settings.load(
        {
            "BOT_TOKEN": " abc ",
            "ROOT_ADMIN_IDS": "[1, 2 3]",
            "TIMEZONE": "America/Los_Angeles",
            "DAILY_SPIN_LIMIT": "5",
            "CODE_TTL_DAYS": "10",
            "DIGEST_HOUR": "7",
            "ENVIRONMENT": "development",
        }
    )
    assert s.bot_token == "abc"
    assert s.root_admin_ids == (1, 2, 3)
    assert s.timezone == "America/Los_Angeles"
    assert (s.daily_spin_limit, s.code_ttl_days, s.digest_hour) == (5, 10, 7)
    assert s.is_dev is True


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"BOT_TOKEN": "  "},
        {"BOT_TOKEN": "abc", "DAILY_SPIN_LIMIT": "zero"},
        {"BOT_TOKEN": "abc", "DAILY_SPIN_LIMIT": "0"},
        {"BOT_TOKEN": "abc", "TIMEZONE": "Mars/Olympus"},
        {"BOT_TOKEN": "abc", "DIGEST_HOUR": "24"},
    ],
)
def test_invalid_env_fails_fast(env):
    with pytest.raises(RuntimeError):
        Settings.load(env)


def test_time_provider_uses_zone():
    tp = TimeProvider("Asia/Tokyo")
    assert tp.now().utcoffset().total_seconds() == 9 * 3600
    assert tp.yesterday() < tp.today()
