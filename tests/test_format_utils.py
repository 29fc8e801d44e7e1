import pytest

from swapbot.core.utils.date_utils import deadline_from_now
from swapbot.core.utils.format_utils import format_liquidity, format_units


@pytest.mark.parametrize("value,expected", [(1000, "$1,000"), (1234567.8, "$1,234,568"), (0, "$0")])
def test_format_liquidity(value, expected):
    assert format_liquidity(value) == expected


def test_format_units():
    assert format_units(1_500_000_000_000_000_000) == "1.5"
    assert format_units(1_000_000, decimals=6) == "1"


def test_deadline_from_now():
    assert deadline_from_now(30, clock=lambda: 1_700_000_000.9) == 1_700_000_030
