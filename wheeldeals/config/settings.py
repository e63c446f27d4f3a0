# wheeldeals/config/settings.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


def _require(env: Mapping[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _int_or_default(env: Mapping[str, str], key: str, default: int, *, minimum: int = 0) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    value = _to_int(raw, key)
    if value < minimum:
        raise RuntimeError(f"{key} must be >= {minimum}, got {value}")
    return value


def _parse_int_list(raw: str | None, key_name: str) -> list[int]:
    """
    Parses comma/space/newline separated ints.
    Accepts:
      "951258732"
      "951258732,123"
      "951258732 123"
      "[951258732, 123]"  (brackets ignored)
    """
    if not raw:
        return []

    cleaned = raw.strip().strip("[](){}").strip()
    if not cleaned:
        return []

    parts = [p for p in re.split(r"[,\s]+", cleaned) if p]

    out: list[int] = []
    for p in parts:
        p2 = p.strip().strip("'\"")
        if not p2:
            continue
        out.append(_to_int(p2, key_name))
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = "sqlite+aiosqlite:///./wheeldeals.db"

    # --- security / admin ---
    root_admin_ids: tuple[int, ...] = ()

    # --- day keys / scheduler ---
    # quota days and reporting days are calendar dates in this zone
    timezone: str = "UTC"
    digest_hour: int = 9

    # --- spin policy ---
    daily_spin_limit: int = 3
    code_ttl_days: int = 7

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        bot_token = _require(env, "BOT_TOKEN")

        database_url = (env.get("DATABASE_URL") or "sqlite+aiosqlite:///./wheeldeals.db").strip()

        root_admin_ids = tuple(_parse_int_list(env.get("ROOT_ADMIN_IDS"), "ROOT_ADMIN_IDS"))

        timezone = (env.get("TIMEZONE") or "UTC").strip() or "UTC"
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise RuntimeError(f"Unknown TIMEZONE: {timezone!r}") from e

        digest_hour = _int_or_default(env, "DIGEST_HOUR", 9)
        if digest_hour > 23:
            raise RuntimeError(f"DIGEST_HOUR must be 0..23, got {digest_hour}")

        daily_spin_limit = _int_or_default(env, "DAILY_SPIN_LIMIT", 3, minimum=1)
        code_ttl_days = _int_or_default(env, "CODE_TTL_DAYS", 7, minimum=1)

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            root_admin_ids=root_admin_ids,
            timezone=timezone,
            digest_hour=digest_hour,
            daily_spin_limit=daily_spin_limit,
            code_ttl_days=code_ttl_days,
            environment=environment,
        )
