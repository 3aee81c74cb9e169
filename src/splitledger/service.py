"""Service layer that composes the record store and the ledger engine.

Each call reads a fresh snapshot from the store and returns new values. When
the expenses and settlements come from separate reads, a settlement recorded
in between can be missed; calling again picks it up.
"""

import logging
from datetime import date

from . import events
from .analytics import build_dashboard
from .config import Settings
from .events import LedgerEvent
from .ledger import compute_balances, is_consistent, to_member_balances
from .models import (
    BalanceReport,
    Dashboard,
    Expense,
    Group,
    GroupId,
    MemberId,
    Settlement,
)
from .simplifier import simplify_debts
from .store import RecordStore

logger = logging.getLogger(__name__)


def build_balance_report(
    group: Group, expenses: list[Expense], settlements: list[Settlement]
) -> BalanceReport:
    """
    Compute member balances and simplified debts for a group.

    This is a pure function of its inputs.
    """
    balances = compute_balances(group.members, expenses, settlements)

    if not is_consistent(balances):
        logger.warning(
            f"Balances of group {group.id} do not sum to zero "
            f"(drift: {sum(balances.values())} cents)"
        )

    return BalanceReport(
        member_balances=to_member_balances(balances),
        simplified_debts=tuple(simplify_debts(balances)),
    )


class LedgerService:
    """Computes balance reports and dashboards from a record store."""

    def __init__(self, store: RecordStore, settings: Settings):
        """Initialize the ledger service."""
        self.store = store
        self.settings = settings

    def get_group_balances(self, group_id: GroupId) -> BalanceReport:
        """
        Get member balances and the payments that settle them.

        Args:
            group_id: The group to report on

        Returns:
            Balance report, members in group order
        """
        group = self.store.get_group(group_id)
        expenses = self.store.list_expenses([group_id])
        settlements = self.store.list_settlements([group_id])

        report = build_balance_report(group, expenses, settlements)

        logger.info(
            f"Group {group_id}: {len(report.member_balances)} members, "
            f"{len(report.simplified_debts)} payments to settle"
        )
        return report

    def publish_group_balances(
        self, group_id: GroupId
    ) -> tuple[BalanceReport, list[LedgerEvent]]:
        """Get the balance report together with the event announcing it."""
        report = self.get_group_balances(group_id)
        return report, [events.balances_updated(group_id, report)]

    def get_dashboard(
        self, member_id: MemberId, today: date | None = None
    ) -> Dashboard:
        """
        Get personal analytics for a member across their active groups.

        Args:
            member_id: The member to report on
            today: Reference date for the monthly series

        Returns:
            The member's dashboard
        """
        groups = self.store.list_groups_for_member(member_id)
        group_ids = [group.id for group in groups]
        expenses = self.store.list_expenses(group_ids)
        settlements = self.store.list_settlements(group_ids)

        logger.info(
            f"Building dashboard for {member_id} from {len(groups)} groups, "
            f"{len(expenses)} expenses"
        )

        return build_dashboard(
            member_id,
            expenses,
            settlements,
            group_count=len(groups),
            today=today,
            months=self.settings.monthly_window_months,
        )

    # ========================================================================
    # Change notifications
    #
    # Called after the record store has accepted a change. They return the
    # events to fan out; delivery is up to the caller.
    # ========================================================================

    def expense_added(self, expense: Expense) -> list[LedgerEvent]:
        return self._with_balances(
            events.expense_added(expense), events.record_group(expense)
        )

    def expense_updated(self, expense: Expense) -> list[LedgerEvent]:
        return self._with_balances(
            events.expense_updated(expense), events.record_group(expense)
        )

    def expense_deleted(self, group_id: GroupId, expense_id: str) -> list[LedgerEvent]:
        return self._with_balances(
            events.expense_deleted(group_id, expense_id), group_id
        )

    def settlement_created(self, settlement: Settlement) -> list[LedgerEvent]:
        return self._with_balances(
            events.settlement_created(settlement), events.record_group(settlement)
        )

    def member_added(self, group_id: GroupId, member_id: MemberId) -> list[LedgerEvent]:
        return self._with_balances(events.member_added(group_id, member_id), group_id)

    def group_created(self, group: Group) -> list[LedgerEvent]:
        return [events.group_created(group)]

    def _with_balances(
        self, event: LedgerEvent, group_id: GroupId
    ) -> list[LedgerEvent]:
        """Follow a change event with fresh balances for its group."""
        _report, balance_events = self.publish_group_balances(group_id)
        return [event, *balance_events]
