from collections import Counter
from random import Random

import pytest

from wheeldeals.services.errors import InvalidInput
from wheeldeals.services.prizes import DEFAULT_WHEEL, PrizeOption, pick_prize


def test_pick_returns_option_from_list():
    rng = Random(7)
    for _ in range(500):
        assert pick_prize(DEFAULT_WHEEL, rng) in DEFAULT_WHEEL


def test_frequencies_follow_weights():
    rng = Random(12345)
    draws = 40_000
    counts = Counter(pick_prize(DEFAULT_WHEEL, rng).label for _ in range(draws))

    total = sum(o.weight for o in DEFAULT_WHEEL)
    for o in DEFAULT_WHEEL:
        assert counts[o.label] / draws == pytest.approx(o.weight / total, abs=0.015)


def test_zero_weight_option_never_drawn():
    options = [PrizeOption("NOTHING", 0), PrizeOption("BOGO", 1), PrizeOption("ALSO NOTHING", 0)]
    rng = Random(3)
    assert {pick_prize(options, rng).label for _ in range(200)} == {"BOGO"}


def test_seeded_rng_is_repeatable():
    a = [pick_prize(DEFAULT_WHEEL, Random(99)).label for _ in range(5)]
    b = [pick_prize(DEFAULT_WHEEL, Random(99)).label for _ in range(5)]
    assert a == b


class _FixedRandom(Random):
    def __init__(self, value: float) -> None:
        super().__init__()
        self._value = value

    def random(self) -> float:
        return self._value


def test_walks_cumulative_weights():
    options = [PrizeOption("A", 1), PrizeOption("B", 2), PrizeOption("C", 1)]  # total 4
    assert pick_prize(options, _FixedRandom(0.0)).label == "A"
    assert pick_prize(options, _FixedRandom(0.24)).label == "A"
    assert pick_prize(options, _FixedRandom(0.25)).label == "B"  # r = 1.0, cumulative A = 1 is not > 1
    assert pick_prize(options, _FixedRandom(0.74)).label == "B"
    assert pick_prize(options, _FixedRandom(0.75)).label == "C"


@pytest.mark.parametrize(
    "options",
    [
        [],
        [PrizeOption("A", 0)],
        [PrizeOption("A", 0), PrizeOption("B", 0)],
        [PrizeOption("A", 2), PrizeOption("B", -1)],
    ],
)
def test_invalid_lists_rejected(options):
    with pytest.raises(InvalidInput):
        pick_prize(options, Random(1))
