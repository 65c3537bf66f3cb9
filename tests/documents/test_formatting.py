from datetime import date
from decimal import Decimal

import pytest

from focusquote.documents.domain.formatting import format_currency, format_date

@pytest.mark.parametrize("value, expected", [
    (Decimal("850"), "R$ 850,00"),
    (Decimal("1234.5"), "R$ 1.234,50"),
    (Decimal("1234567.891"), "R$ 1.234.567,89"),
    (Decimal("0.005"), "R$ 0,01"),
    (Decimal("-50"), "-R$ 50,00"),
    (0, "R$ 0,00"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected

def test_format_currency_none():
    assert format_currency(None) == ""

def test_format_date():
    assert format_date(date(2024, 5, 3)) == "03/05/2024"
    assert format_date(None) == ""
