"""Money helpers

Balances are exact decimals quantized to cents, so zero checks and
overpayment checks compare values directly.
"""

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from src.domain.errors import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest magnitude a Numeric(18, 2) column holds
MAX_MONEY = Decimal("9999999999999999.99")

_ROUNDING = Context(prec=60, rounding=ROUND_HALF_UP)

Number = Union[Decimal, int, float, str]


def round_cents(value: Number) -> Decimal:
    """Quantize to cents without a storage range check.

    Used for requested amounts so they can be compared against a balance
    before anything is stored.
    """
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError("Amount must be a number", details={"amount": str(value)})
    if not value.is_finite():
        raise ValidationError("Amount must be a finite number", details={"amount": str(value)})
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP, context=_ROUNDING)
    except InvalidOperation:
        raise ValidationError("Amount is out of range", details={"amount": str(value)})


def in_money_range(value: Decimal) -> bool:
    return value.is_finite() and abs(value) <= MAX_MONEY


def to_money(value: Number) -> Decimal:
    """Quantize to cents; raises ValidationError when the value cannot be stored"""
    amount = round_cents(value)
    if not in_money_range(amount):
        raise ValidationError("Amount is out of range", details={"amount": str(amount)})
    return amount


def is_zero(value: Decimal) -> bool:
    return to_money(value) == ZERO
