"""Conversion between decimal currency amounts and integer cents.

Record amounts are summed exactly as Decimals. Each total is rounded to
integer cents once, half away from zero, and quantized back to two decimal
places when a result is presented.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_cents(amount: Decimal | int | float | str) -> int:
    """
    Convert a currency amount to integer cents.

    ROUND_HALF_UP rounds ties away from zero for both signs, so -0.005
    becomes -1 cent and 0.005 becomes 1 cent.

    Args:
        amount: Currency amount (floats are converted through str)

    Returns:
        Amount in cents
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    cents = amount * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a Decimal with exactly two places."""
    return (Decimal(cents) / 100).quantize(CENT)


def round_money(amount: Decimal) -> Decimal:
    """Round a Decimal amount to cents, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def has_unusual_precision(amount: Decimal) -> bool:
    """True if the amount carries more than two decimal places."""
    exponent = amount.normalize().as_tuple().exponent
    return isinstance(exponent, int) and exponent < -2


def exact_amount(amount: Decimal, record: str) -> Decimal:
    """
    Return a record's amount unrounded, noting sub-cent precision.

    Sums of such amounts are rounded to cents once, after aggregation, so
    sub-cent shares are kept here rather than rounded per record.

    Args:
        amount: The stored amount
        record: Label of the owning record, used in the log line

    Returns:
        The amount as stored
    """
    if has_unusual_precision(amount):
        logger.debug(f"{record} has unusual precision: {amount}")
    return amount
