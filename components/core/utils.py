"""Small helpers shared across components."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from components.core.exceptions import InvalidInput

CENT = Decimal("0.01")


def to_decimal(value: Union[int, float, str, Decimal, None]) -> Decimal:
    """Convert a money value to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value.quantize(CENT)
    return Decimal(str(value)).quantize(CENT)


def first_of_month(value: Union[date, datetime]) -> date:
    return date(value.year, value.month, 1)


def parse_month(value: Optional[str], default: Optional[date] = None) -> date:
    """Parse ``YYYY-MM`` or ``YYYY-MM-DD`` into the first day of that month."""
    if not value:
        return first_of_month(default or date.today())
    for fmt in ("%Y-%m", "%Y-%m-%d"):
        try:
            return first_of_month(datetime.strptime(value, fmt))
        except ValueError:
            continue
    raise InvalidInput("Invalid month, expected YYYY-MM", month=value)
