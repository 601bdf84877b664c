"""
Money and date helpers.

All amounts are Decimal; all dates travel as ISO strings (YYYY-MM-DD)
and months as YYYY-MM prefixes, matching how they are stored.
"""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union


CENT = Decimal("0.01")

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

MONTH_NAMES_PT = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def round_currency(value: Union[Decimal, int, float, str]) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_brl(value: Union[Decimal, int, float]) -> str:
    """
    Format an amount as Brazilian reais.

    >>> format_brl(Decimal("1234.5"))
    'R$ 1.234,50'
    """
    amount = round_currency(value)
    sign = "-" if amount < 0 else ""
    integer, _, cents = f"{abs(amount):.2f}".partition(".")
    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)
    return f"{sign}R$ {'.'.join(groups)},{cents}"


def parse_amount(text: str) -> Decimal:
    """
    Parse user-typed money text.

    Accepts "12.50", "12,50" and "1.234,56". Raises ValueError on
    anything that is not a number.
    """
    cleaned = text.strip().replace("R$", "").replace(" ", "")
    if not cleaned:
        raise ValueError("Empty amount")
    if "," in cleaned:
        # pt-BR: dots group thousands, comma marks the decimals
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Not a number: {text!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a number: {text!r}")
    return amount


def today_iso() -> str:
    return date.today().isoformat()


def current_month() -> str:
    """The current month as YYYY-MM."""
    return date.today().isoformat()[:7]


def month_key(value: Union[str, date, datetime]) -> str:
    """YYYY-MM bucket of a date or ISO date string."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:7]
    return value[:7]


def check_month(month: str) -> str:
    """Return the month unchanged if it is a YYYY-MM string, else raise ValueError."""
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        raise ValueError(f"Invalid month: {month!r} (expected YYYY-MM)")
    return month


def in_month(iso_date: str, month: str) -> bool:
    """True when an ISO date string falls in the YYYY-MM month."""
    return month_key(iso_date) == month


def month_label(month: str) -> str:
    """
    Human label for a YYYY-MM month.

    >>> month_label("2025-01")
    'janeiro de 2025'
    """
    year, _, number = month.partition("-")
    return f"{MONTH_NAMES_PT[int(number) - 1]} de {year}"
