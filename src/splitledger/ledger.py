"""Ledger aggregation: net balance per member from expenses and settlements."""

import logging
from collections.abc import Iterable
from decimal import Decimal

from .models import Expense, MemberBalance, MemberId, Settlement
from .money import exact_amount, from_cents, to_cents

logger = logging.getLogger(__name__)

# Balances are accurate to a cent per member after rounding.
BALANCE_TOLERANCE_CENTS = 1


def compute_balances(
    member_ids: Iterable[MemberId],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
) -> dict[MemberId, int]:
    """
    Compute each current member's net balance in cents.

    For every expense the payer is credited the full amount and every
    participant is debited their recorded share; a payer who is also a
    participant gets both. For every settlement the payer is credited and the
    payee debited.

    Amounts are summed exactly and each member's total is rounded to the
    cent once, so sub-cent shares do not drift across many expenses.

    References to members no longer in the group are skipped: their effects
    are dropped, not reassigned.

    Args:
        member_ids: Current members of the group, in display order
        expenses: Non-deleted expenses of the group
        settlements: Settlements of the group

    Returns:
        Mapping of member to balance in cents (positive = is owed,
        negative = owes), with an entry for every current member
    """
    exact: dict[MemberId, Decimal] = {member_id: Decimal("0") for member_id in member_ids}
    stale: set[MemberId] = set()

    def apply(member_id: MemberId, amount: Decimal) -> None:
        if member_id in exact:
            exact[member_id] += amount
        else:
            stale.add(member_id)

    expense_count = 0
    for expense in expenses:
        expense_count += 1
        apply(expense.paid_by, exact_amount(expense.amount, f"Expense {expense.id}"))
        for participant in expense.participants:
            apply(
                participant.member_id,
                -exact_amount(participant.share, f"Expense {expense.id} share"),
            )

    settlement_count = 0
    for settlement in settlements:
        settlement_count += 1
        amount = exact_amount(settlement.amount, f"Settlement {settlement.id}")
        apply(settlement.paid_by, amount)
        apply(settlement.paid_to, -amount)

    if stale:
        logger.debug(
            f"Ignored records referencing {len(stale)} former member(s): "
            f"{', '.join(sorted(stale))}"
        )

    logger.debug(
        f"Aggregated {expense_count} expenses and {settlement_count} settlements "
        f"for {len(exact)} members"
    )
    return {member_id: to_cents(total) for member_id, total in exact.items()}


def to_member_balances(balances: dict[MemberId, int]) -> tuple[MemberBalance, ...]:
    """Present cent balances as MemberBalance values, keeping member order."""
    return tuple(
        MemberBalance(member_id=member_id, balance=from_cents(cents))
        for member_id, cents in balances.items()
    )


def balance_drift(balances: dict[MemberId, int]) -> int:
    """Sum of all balances in cents; zero for a self-contained group."""
    return sum(balances.values())


def is_consistent(balances: dict[MemberId, int]) -> bool:
    """
    Check that balances sum to zero within a cent per member.

    Rounding each total leaves at most half a cent per member. Exact splits
    are applied verbatim, so larger drift means their shares did not add up
    to the amount.
    """
    return abs(balance_drift(balances)) <= BALANCE_TOLERANCE_CENTS * len(balances)

