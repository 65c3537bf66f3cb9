from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from focusquote.documents.config import document_settings

CENTS = Decimal("0.01")

def format_currency(value: Union[Decimal, int, float, None]) -> str:
    """Formate un montant en réais : Decimal('1234.5') -> 'R$ 1.234,50'.

    Seul endroit où l'on arrondit (demi vers le haut, deux décimales).
    Un montant négatif garde son signe devant le symbole : '-R$ 10,00'.
    """
    if value is None:
        return ""
    amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""

    # 1,234.50 -> 1.234,50
    s = f"{abs(amount):,.2f}"
    s = s.replace(",", "\0").replace(".", document_settings.DECIMAL_SEPARATOR)
    s = s.replace("\0", document_settings.THOUSANDS_SEPARATOR)
    return f"{sign}{document_settings.CURRENCY_SYMBOL} {s}"

def format_date(value: Optional[date]) -> str:
    """Date au format jour/mois/année, chaîne vide si absente."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")
