import re
from random import Random

from wheeldeals.services.codes import generate_code, normalize_code

CODE_RE = re.compile(r"^WD-[A-Z0-9]{6}$")


def test_code_format():
    for _ in range(200):
        assert CODE_RE.match(generate_code())


def test_seeded_codes_are_repeatable():
    assert generate_code(Random(5)) == generate_code(Random(5))
    assert CODE_RE.match(generate_code(Random(5)))


def test_normalize_code():
    assert normalize_code("  wd-abc123  ") == "WD-ABC123"
    assert normalize_code("WD-ABC123") == "WD-ABC123"
    assert normalize_code(None) == ""
