"""Share calculation for the four split types.

This runs on the input side, before an expense is handed to the ledger. The
ledger itself never recomputes shares; it applies whatever was recorded.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import SplitError
from .models import (
    Expense,
    ExpenseCategory,
    GroupId,
    MemberId,
    Participant,
    SplitType,
)
from .money import from_cents, to_cents

logger = logging.getLogger(__name__)

PERCENT_TOLERANCE = Decimal("0.01")


def _divide_cents(numerator: int, denominator: int) -> int:
    """Integer division of cents rounded half away from zero."""
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _with_remainder_on_first(
    amount_cents: int, share_cents: list[int]
) -> list[int]:
    """Put the rounding remainder on the first share so shares sum to amount."""
    remainder = amount_cents - sum(share_cents)
    if remainder:
        logger.debug(f"Assigning rounding remainder of {remainder} cents to first share")
        share_cents[0] += remainder
    return share_cents


def equal_shares(amount_cents: int, count: int) -> list[int]:
    """
    Split an amount equally between `count` participants.

    Each share is amount / count rounded to the cent; the remainder
    (amount - share * count), which may be negative, goes to the first.

    Args:
        amount_cents: Expense amount in cents
        count: Number of participants

    Returns:
        Shares in cents, summing exactly to amount_cents
    """
    if count <= 0:
        raise SplitError("Cannot split an expense between zero participants")
    share = _divide_cents(amount_cents, count)
    return _with_remainder_on_first(amount_cents, [share] * count)


def _proportional_shares(
    amount_cents: int, weights: Sequence[Decimal], total: Decimal
) -> list[int]:
    shares = [
        int(
            (Decimal(amount_cents) * weight / total).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
        )
        for weight in weights
    ]
    return _with_remainder_on_first(amount_cents, shares)


def weighted_shares(amount_cents: int, weights: Sequence[Decimal]) -> list[int]:
    """
    Split an amount in proportion to weights.

    Args:
        amount_cents: Expense amount in cents
        weights: Non-negative weights, one per participant

    Returns:
        Shares in cents, summing exactly to amount_cents
    """
    total = sum(weights, Decimal("0"))
    if total <= 0:
        raise SplitError("Share weights must add up to more than zero")
    return _proportional_shares(amount_cents, weights, total)


def percentage_shares(amount_cents: int, percentages: Sequence[Decimal]) -> list[int]:
    """
    Split an amount by percentage: each share is amount * pct / 100.

    Percentages may miss 100 by up to the tolerance; the remainder on the
    first share absorbs the difference.

    Raises:
        SplitError: If the percentages do not add up to 100
    """
    total = sum(percentages, Decimal("0"))
    if abs(total - 100) > PERCENT_TOLERANCE:
        raise SplitError(f"Percentages must add up to 100, got {total}")
    return _proportional_shares(amount_cents, percentages, Decimal("100"))


def compute_shares(
    amount: Decimal,
    member_ids: Sequence[MemberId],
    split_type: SplitType = SplitType.EQUAL,
    values: Sequence[Decimal] | None = None,
) -> tuple[Participant, ...]:
    """
    Compute participant shares for an expense.

    Args:
        amount: Expense amount
        member_ids: Participants, in submission order
        split_type: How to divide the amount
        values: Per-participant input for non-equal splits: exact amounts,
            percentages, or share weights. Ignored for equal splits.

    Returns:
        Participants with their shares

    Raises:
        SplitError: If the input cannot be split as requested
    """
    if not member_ids:
        raise SplitError("At least one participant is required")
    if amount <= 0:
        raise SplitError(f"Expense amount must be positive, got {amount}")

    amount_cents = to_cents(amount)

    if split_type == SplitType.EQUAL:
        share_cents = equal_shares(amount_cents, len(member_ids))
        return tuple(
            Participant(member_id=member_id, share=from_cents(cents))
            for member_id, cents in zip(member_ids, share_cents)
        )

    if values is None or len(values) != len(member_ids):
        raise SplitError(
            f"A {split_type.value} split needs one value per participant "
            f"({len(member_ids)} participants, "
            f"{0 if values is None else len(values)} values)"
        )
    values = [Decimal(str(v)) for v in values]
    if any(v < 0 for v in values):
        raise SplitError("Split values cannot be negative")

    if split_type == SplitType.EXACT:
        total = sum(values, Decimal("0"))
        if abs(to_cents(total) - amount_cents) > 1:
            # Caller-side data-quality concern; the ledger applies shares as given
            logger.warning(
                f"Exact shares add up to {total}, expense amount is {amount}"
            )
        return tuple(
            Participant(member_id=member_id, share=from_cents(to_cents(value)))
            for member_id, value in zip(member_ids, values)
        )

    if split_type == SplitType.PERCENTAGE:
        share_cents = percentage_shares(amount_cents, values)
    else:
        share_cents = weighted_shares(amount_cents, values)
    return tuple(
        Participant(member_id=member_id, share=from_cents(cents))
        for member_id, cents in zip(member_ids, share_cents)
    )


def build_expense(
    *,
    id: str,
    title: str,
    amount: Decimal,
    paid_by: MemberId,
    member_ids: Sequence[MemberId],
    date: datetime,
    split_type: SplitType = SplitType.EQUAL,
    values: Sequence[Decimal] | None = None,
    category: ExpenseCategory = ExpenseCategory.OTHER,
    group_id: GroupId | None = None,
    currency: str = "USD",
    notes: str | None = None,
) -> Expense:
    """Build an Expense whose participant shares are computed from the split."""
    participants = compute_shares(amount, member_ids, split_type, values)
    return Expense(
        id=id,
        group_id=group_id,
        title=title,
        amount=amount,
        currency=currency,
        paid_by=paid_by,
        participants=participants,
        split_type=split_type,
        category=category,
        date=date,
        notes=notes,
    )
