# wheeldeals/services/codes.py
from __future__ import annotations

import secrets
import string
from random import Random

CODE_PREFIX = "WD-"
CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(rng: Random | None = None) -> str:
    """
    WD-XXXXXX, uppercase alphanumerics (36^6 space).
    Uniqueness is enforced by the spins.code index, not here.
    """
    if rng is None:
        body = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    else:
        body = "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{CODE_PREFIX}{body}"


def normalize_code(raw: str | None) -> str:
    return (raw or "").strip().upper()
