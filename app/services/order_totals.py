from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

Number = Union[Decimal, int, str, float]

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Coerce a money value to Decimal without passing through binary floats."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calculate_total(lines: Iterable[Tuple[Number, int]]) -> Decimal:
    """
    Authoritative order total: sum of price x quantity over the line items.

    The result is what gets persisted on the order; client supplied totals
    are never an input here.
    """
    total = Decimal("0")

    for price, quantity in lines:
        price = to_decimal(price)
        if price < 0:
            raise ValueError(f"Negative price: {price}")
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")

        total += price * quantity

    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Number) -> int:
    """Convert a rupee amount to paise, the unit Razorpay expects."""
    paise = (to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(paise)
