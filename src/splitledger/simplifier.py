"""Debt simplification: turn net balances into a short list of payments.

The matching is greedy. Debtors and creditors are each kept in balance order
(the group's member order) and paired head to head, so it never emits more
than debtors + creditors - 1 payments and always zeroes every balance it
covers. It does not search for the true minimum number of payments; that
problem is subset-sum hard and the greedy result is the accepted trade-off.
The queue order is part of the contract: reordering members changes who pays
whom.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from .models import MemberId, SimplifiedDebt
from .money import from_cents

logger = logging.getLogger(__name__)

# Balances within a cent of zero count as settled.
SETTLED_THRESHOLD_CENTS = 1


@dataclass
class QueueEntry:
    """A member waiting in a debtor or creditor queue."""

    member_id: MemberId
    remaining: int  # cents still to pay or receive, always positive when queued


def partition_balances(
    balances: Mapping[MemberId, int],
) -> tuple[list[QueueEntry], list[QueueEntry]]:
    """
    Split balances into debtor and creditor queues.

    Args:
        balances: Member balances in cents

    Returns:
        Tuple of (debtors, creditors) in balance order
    """
    debtors: list[QueueEntry] = []
    creditors: list[QueueEntry] = []
    for member_id, cents in balances.items():
        if cents < -SETTLED_THRESHOLD_CENTS:
            debtors.append(QueueEntry(member_id, -cents))
        elif cents > SETTLED_THRESHOLD_CENTS:
            creditors.append(QueueEntry(member_id, cents))
    return debtors, creditors


def simplify_debts(balances: Mapping[MemberId, int]) -> list[SimplifiedDebt]:
    """
    Compute payments that settle the given balances.

    Repeatedly pays min(debt, credit) from the head debtor to the head
    creditor and advances whichever side reached zero (both if both did),
    stopping when either queue runs out.

    Args:
        balances: Member balances in cents (positive = is owed)

    Returns:
        Payments in the order they were generated
    """
    debtors, creditors = partition_balances(balances)
    transactions: list[SimplifiedDebt] = []

    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]
        amount = min(debtor.remaining, creditor.remaining)

        transactions.append(
            SimplifiedDebt(
                from_member=debtor.member_id,
                to_member=creditor.member_id,
                amount=from_cents(amount),
            )
        )
        logger.debug(f"{debtor.member_id} pays {creditor.member_id} {amount} cents")

        debtor.remaining -= amount
        creditor.remaining -= amount

        if debtor.remaining < SETTLED_THRESHOLD_CENTS:
            i += 1
        if creditor.remaining < SETTLED_THRESHOLD_CENTS:
            j += 1

    logger.debug(
        f"Simplified {len(debtors)} debtors and {len(creditors)} creditors "
        f"into {len(transactions)} payments"
    )
    return transactions
