"""Personal analytics for a member across all of their groups."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .models import (
    CategoryAmount,
    Dashboard,
    DashboardStats,
    Expense,
    ExpenseCategory,
    MemberId,
    MonthlySpend,
    Settlement,
)
from .money import exact_amount, round_money

logger = logging.getLogger(__name__)

DEFAULT_MONTHS = 6


@dataclass
class Totals:
    """Exact, unrounded totals before display clamping."""

    spent: Decimal = Decimal("0")
    owed: Decimal = Decimal("0")
    owing: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.owed - self.owing


def summarize_totals(
    member_id: MemberId,
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
) -> Totals:
    """
    Accumulate spent, owed and owing totals for a member.

    For each expense the member takes part in, net = (amount if they paid
    else 0) - their share; a positive net is owed to them, a negative net is
    owed by them. Settlements they paid reduce owing; settlements they
    received reduce owed.

    Args:
        member_id: The member to summarize
        expenses: Expenses visible to the member
        settlements: Settlements in the member's groups

    Returns:
        Unclamped, unrounded totals
    """
    totals = Totals()

    for expense in expenses:
        paid_by_me = expense.paid_by == member_id
        amount = exact_amount(expense.amount, f"Expense {expense.id}")
        if paid_by_me:
            totals.spent += amount

        my_share = expense.share_of(member_id)
        if my_share is None:
            continue

        net = (amount if paid_by_me else 0) - exact_amount(
            my_share, f"Expense {expense.id} share"
        )
        if net > 0:
            totals.owed += net
        elif net < 0:
            totals.owing += -net

    for settlement in settlements:
        amount = exact_amount(settlement.amount, f"Settlement {settlement.id}")
        if settlement.paid_by == member_id:
            totals.owing -= amount
        elif settlement.paid_to == member_id:
            totals.owed -= amount

    return totals


def category_breakdown(
    member_id: MemberId, expenses: Sequence[Expense]
) -> list[CategoryAmount]:
    """
    Sum the member's own share per category, largest first.

    Args:
        member_id: The member to summarize
        expenses: Expenses visible to the member

    Returns:
        Category amounts sorted descending by amount
    """
    by_category: dict[ExpenseCategory, Decimal] = {}
    for expense in expenses:
        my_share = expense.share_of(member_id)
        if my_share is None:
            continue
        by_category[expense.category] = by_category.get(
            expense.category, Decimal("0")
        ) + exact_amount(my_share, f"Expense {expense.id} share")

    ordered = sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryAmount(category=category, amount=round_money(total))
        for category, total in ordered
    ]


def trailing_months(today: date, count: int = DEFAULT_MONTHS) -> list[date]:
    """
    First day of each of the last `count` calendar months, oldest first.

    The current month is included as the last entry.
    """
    months = []
    for offset in range(count - 1, -1, -1):
        index = today.year * 12 + (today.month - 1) - offset
        months.append(date(index // 12, index % 12 + 1, 1))
    return months


def monthly_spend(
    member_id: MemberId,
    expenses: Sequence[Expense],
    today: date,
    count: int = DEFAULT_MONTHS,
) -> list[MonthlySpend]:
    """
    Amount the member paid out in each trailing month.

    Counts the full amount of expenses the member paid, not their share.
    Months without activity are reported as zero.

    Args:
        member_id: The member to summarize
        expenses: Expenses visible to the member
        today: Reference date; its month is the newest in the series
        count: Number of months in the series

    Returns:
        Exactly `count` entries, oldest to newest
    """
    months = trailing_months(today, count)
    spent: dict[tuple[int, int], Decimal] = {
        (m.year, m.month): Decimal("0") for m in months
    }

    for expense in expenses:
        if expense.paid_by != member_id:
            continue
        key = (expense.date.year, expense.date.month)
        if key in spent:
            spent[key] += exact_amount(expense.amount, f"Expense {expense.id}")

    return [
        MonthlySpend(
            month=first.strftime("%b %y"),
            key=first.strftime("%Y-%m"),
            spent=round_money(spent[(first.year, first.month)]),
        )
        for first in months
    ]


def build_dashboard(
    member_id: MemberId,
    expenses: Sequence[Expense],
    settlements: Sequence[Settlement],
    group_count: int | None = None,
    today: date | None = None,
    months: int = DEFAULT_MONTHS,
) -> Dashboard:
    """
    Build a member's dashboard: totals, category breakdown and monthly series.

    Owed and owing are clamped at zero for display once settlements are
    taken into account; this hides overpayments rather than correcting the
    ledger. The net balance is the unclamped difference.

    Args:
        member_id: The member to summarize
        expenses: Non-deleted expenses from the member's groups
        settlements: Settlements from the member's groups
        group_count: Number of groups the member belongs to; defaults to the
            number of distinct groups referenced by the records
        today: Reference date for the monthly series (defaults to today)
        months: Length of the monthly series

    Returns:
        The member's dashboard
    """
    if today is None:
        today = date.today()
    if group_count is None:
        group_ids = {e.group_id for e in expenses} | {s.group_id for s in settlements}
        group_ids.discard(None)
        group_count = len(group_ids)

    totals = summarize_totals(member_id, expenses, settlements)
    if totals.owed < 0 or totals.owing < 0:
        logger.debug(
            f"Clamping negative totals for {member_id}: "
            f"owed={totals.owed}, owing={totals.owing}"
        )

    stats = DashboardStats(
        total_spent=round_money(totals.spent),
        total_owed=round_money(max(Decimal("0"), totals.owed)),
        total_owing=round_money(max(Decimal("0"), totals.owing)),
        net_balance=round_money(totals.net),
        group_count=group_count,
        expense_count=len(expenses),
    )

    return Dashboard(
        stats=stats,
        category_data=tuple(category_breakdown(member_id, expenses)),
        monthly_data=tuple(monthly_spend(member_id, expenses, today, months)),
    )
