"""Display formatting shared by the report and summary views."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float]

_CENTS = Decimal("0.01")


def two_places(value: Number) -> str:
    """Fixed two-decimal rendering ("12.50")."""
    return str(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def plain_number(value: Number) -> str:
    """Shortest rendering without exponent or trailing zeros ("12.5", "100")."""
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return str(d.quantize(Decimal("1")))
    return format(d.normalize(), "f")


def format_money(value: Number, symbol: str = "Rs.") -> str:
    """Currency-prefixed, two decimals, no grouping ("Rs.1500.00")."""
    return f"{symbol}{two_places(value)}"


def optional_money(value: Optional[Decimal], symbol: str = "Rs.") -> str:
    """Money or "-" when nothing (or zero) was entered."""
    if not value:
        return "-"
    return format_money(value, symbol)


def optional_km(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return two_places(value)


def long_date(day: date) -> str:
    """"March 5, 2025"."""
    return f"{day:%B} {day.day}, {day.year}"


def generated_on(moment: Optional[datetime] = None) -> str:
    """"March 5, 2025, 3:07 PM"."""
    moment = moment or datetime.now()
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{long_date(moment.date())}, {hour}:{moment:%M} {meridiem}"
