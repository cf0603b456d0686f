"""Cent-precision currency helpers."""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
     """Convert to Decimal via str so floats keep their printed value."""
     if isinstance(value, Decimal):
          return value
     try:
          return Decimal(str(value))
     except InvalidOperation:
          raise ValueError(f"not a number: {value!r}")


def round2(value: Number) -> Decimal:
     """Round half-up to 2 decimal places."""
     return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def percent_of(amount: Number, percent: Number) -> Decimal:
     """`percent` % of `amount`, rounded to cents."""
     return round2(to_decimal(amount) * to_decimal(percent) / Decimal(100))
