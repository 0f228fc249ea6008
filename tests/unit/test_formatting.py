import pytest

from portal.utils.formatting import format_price

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "R$ 0,00"),
        (5, "R$ 0,05"),
        (9990, "R$ 99,90"),
        (24990, "R$ 249,90"),
        (123456789, "R$ 1.234.567,89"),
        (-1500, "-R$ 15,00"),
    ],
)
def test_format_price_brl(amount, expected):
    assert format_price(amount) == expected


def test_format_price_other_currency_uses_code():
    assert format_price(1000, "usd") == "USD 10,00"
