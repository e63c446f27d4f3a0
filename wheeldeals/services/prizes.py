# wheeldeals/services/prizes.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from wheeldeals.services.errors import InvalidInput


@dataclass(frozen=True, slots=True)
class PrizeOption:
    label: str
    weight: float


# Used for merchants without a configured wheel
DEFAULT_WHEEL: tuple[PrizeOption, ...] = (
    PrizeOption("10% OFF", 40),
    PrizeOption("15% OFF", 25),
    PrizeOption("20% OFF", 20),
    PrizeOption("BOGO", 10),
    PrizeOption("FREE UPGRADE", 5),
)


def pick_prize(options: Sequence[PrizeOption], rng: random.Random | None = None) -> PrizeOption:
    """
    Weighted draw: uniform r in [0, total), return the first option whose
    cumulative weight exceeds r. Zero-weight options are never returned.
    """
    if not options:
        raise InvalidInput("Prize list is empty")
    if any(o.weight < 0 for o in options):
        raise InvalidInput("Prize weights must be >= 0")

    total = sum(o.weight for o in options)
    if total <= 0:
        raise InvalidInput("Total prize weight must be > 0")

    rng = rng or random.SystemRandom()
    r = rng.random() * total

    upto = 0.0
    for o in options:
        upto += o.weight
        if upto > r:
            return o

    # float rounding can leave r == upto at the very end
    return next(o for o in reversed(options) if o.weight > 0)
