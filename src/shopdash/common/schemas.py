"""Shared Pydantic types.

Money values travel through the app as ``Decimal`` with two places and are
rendered as plain JSON numbers rounded to cents, which is what the dashboard
charts expect. JSON has no scale, so 500.00 goes out as 500.0.
"""
import decimal
from typing import Annotated

from pydantic import PlainSerializer

CENT = decimal.Decimal("0.01")


def to_money(value) -> decimal.Decimal:
    """Coerce a store value (Decimal, float, int, str or None) to 2dp."""
    if value is None:
        return decimal.Decimal("0.00")
    if not isinstance(value, decimal.Decimal):
        value = decimal.Decimal(str(value))
    return value.quantize(CENT, rounding=decimal.ROUND_HALF_UP)


Money = Annotated[
    decimal.Decimal,
    PlainSerializer(lambda v: round(float(v), 2), return_type=float, when_used="json"),
]
