import math

import pytest

from core.normalizer import to_int, to_int_or_none, to_text_or_none


@pytest.mark.parametrize(
    "value, expected",
    [(3, 3), (" 4 ", 4), ("1200.50", 1200), (7.9, 7), ("-2", -2)],
)
def test_to_int(value, expected):
    assert to_int(value) == expected


@pytest.mark.parametrize("value", ["", "abc", None, True, math.inf, "nan", [1]])
def test_to_int_rejects(value):
    with pytest.raises(ValueError):
        to_int(value)


def test_optional_helpers():
    assert to_int_or_none(None) is None
    assert to_int_or_none("") is None
    assert to_int_or_none("x") is None
    assert to_int_or_none("12") == 12
    assert to_text_or_none(52.5) == "52.5"
    assert to_text_or_none("  ") is None
    assert to_text_or_none(None) is None
