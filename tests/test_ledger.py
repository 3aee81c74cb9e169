"""Tests for ledger balance aggregation."""

import logging
from datetime import datetime
from decimal import Decimal

from splitledger.ledger import (
    balance_drift,
    compute_balances,
    is_consistent,
    to_member_balances,
)
from splitledger.models import (
    Expense,
    MemberId,
    Participant,
    Settlement,
    SplitType,
)
from splitledger.splits import build_expense

ALICE = MemberId("alice")
BOB = MemberId("bob")
CAROL = MemberId("carol")
DAVE = MemberId("dave")

MEMBERS = [ALICE, BOB, CAROL]


def make_expense(
    id: str, paid_by: MemberId, amount: str, shares: dict[MemberId, str]
) -> Expense:
    """Create an exact-split expense for testing."""
    return Expense(
        id=id,
        group_id="g1",
        title=f"Test expense {id}",
        amount=Decimal(amount),
        paid_by=paid_by,
        participants=tuple(
            Participant(member_id=member_id, share=Decimal(share))
            for member_id, share in shares.items()
        ),
        split_type=SplitType.EXACT,
        date=datetime(2026, 10, 1, 12, 0),
    )


def make_settlement(id: str, paid_by: MemberId, paid_to: MemberId, amount: str):
    return Settlement(
        id=id,
        group_id="g1",
        paid_by=paid_by,
        paid_to=paid_to,
        amount=Decimal(amount),
        date=datetime(2026, 10, 2, 12, 0),
    )


def equal_expense(id: str, paid_by: MemberId, amount: str, member_ids) -> Expense:
    return build_expense(
        id=id,
        title=f"Equal expense {id}",
        amount=Decimal(amount),
        paid_by=paid_by,
        member_ids=member_ids,
        date=datetime(2026, 10, 1, 12, 0),
        group_id="g1",
    )


class TestExpenseAggregation:
    """Payers are credited the amount, participants debited their share."""

    def test_payer_is_first_participant(self):
        """100 split three ways, payer first: payer ends at +66.66."""
        expense = equal_expense("e1", ALICE, "100", [ALICE, BOB, CAROL])

        balances = compute_balances(MEMBERS, [expense], [])

        assert balances == {ALICE: 6666, BOB: -3333, CAROL: -3333}

    def test_payer_is_not_first_participant(self):
        """Same expense with someone else first: payer ends at +66.67."""
        expense = equal_expense("e1", ALICE, "100", [BOB, ALICE, CAROL])

        balances = compute_balances(MEMBERS, [expense], [])

        assert balances == {ALICE: 6667, BOB: -3334, CAROL: -3333}

    def test_self_share_nets_out(self):
        expense = make_expense("e1", ALICE, "40", {ALICE: "40"})

        balances = compute_balances(MEMBERS, [expense], [])

        assert balances == {ALICE: 0, BOB: 0, CAROL: 0}

    def test_payer_not_participating(self):
        expense = make_expense("e1", ALICE, "50", {BOB: "30", CAROL: "20"})

        balances = compute_balances(MEMBERS, [expense], [])

        assert balances == {ALICE: 5000, BOB: -3000, CAROL: -2000}

    def test_multiple_expenses_accumulate(self):
        expenses = [
            make_expense("e1", ALICE, "90", {ALICE: "30", BOB: "30", CAROL: "30"}),
            make_expense("e2", BOB, "60", {ALICE: "20", BOB: "20", CAROL: "20"}),
        ]

        balances = compute_balances(MEMBERS, expenses, [])

        assert balances == {ALICE: 4000, BOB: 1000, CAROL: -5000}
        assert balance_drift(balances) == 0


class TestSettlementAggregation:
    """Settlements move both parties toward zero."""

    def test_settlement_reduces_debt(self):
        """Y pays X 30 after X advanced 50 for Y (30) and Z (20)."""
        expense = make_expense("e1", ALICE, "50", {BOB: "30", CAROL: "20"})
        settlement = make_settlement("s1", BOB, ALICE, "30")

        balances = compute_balances(MEMBERS, [expense], [settlement])

        assert balances == {ALICE: 2000, BOB: 0, CAROL: -2000}
        assert balance_drift(balances) == 0

    def test_overpayment_flips_sign(self):
        expense = make_expense("e1", ALICE, "50", {BOB: "50"})
        settlement = make_settlement("s1", BOB, ALICE, "60")

        balances = compute_balances([ALICE, BOB], [expense], [settlement])

        assert balances == {ALICE: -1000, BOB: 1000}


class TestMembership:
    """Only current members carry balances."""

    def test_every_member_starts_at_zero(self):
        balances = compute_balances(MEMBERS, [], [])

        assert balances == {ALICE: 0, BOB: 0, CAROL: 0}
        assert list(balances) == MEMBERS

    def test_no_members(self):
        expense = make_expense("e1", ALICE, "10", {BOB: "10"})

        assert compute_balances([], [expense], []) == {}

    def test_departed_member_references_are_dropped(self):
        """Dave left the group: his share and payments are ignored, not moved."""
        expenses = [
            make_expense("e1", ALICE, "30", {ALICE: "10", BOB: "10", DAVE: "10"}),
            make_expense("e2", DAVE, "20", {ALICE: "10", DAVE: "10"}),
        ]
        settlements = [make_settlement("s1", DAVE, BOB, "5")]

        balances = compute_balances([ALICE, BOB], expenses, settlements)

        assert DAVE not in balances
        assert balances == {ALICE: 1000, BOB: -1500}

    def test_departed_members_are_logged_at_debug(self, caplog):
        expense = make_expense("e1", DAVE, "20", {ALICE: "10", DAVE: "10"})

        with caplog.at_level(logging.DEBUG, logger="splitledger.ledger"):
            compute_balances([ALICE, BOB], [expense], [])

        stale = [r for r in caplog.records if "former member" in r.getMessage()]
        assert [r.levelno for r in stale] == [logging.DEBUG]

    def test_member_order_is_preserved(self):
        balances = compute_balances([CAROL, ALICE, BOB], [], [])

        assert list(balances) == [CAROL, ALICE, BOB]


class TestConsistency:
    """Balances of a self-contained group sum to zero."""

    def test_equal_splits_are_consistent(self):
        expenses = [
            equal_expense("e1", ALICE, "100", MEMBERS),
            equal_expense("e2", BOB, "10.01", MEMBERS),
            equal_expense("e3", CAROL, "0.05", [CAROL, ALICE]),
        ]

        balances = compute_balances(MEMBERS, expenses, [])

        assert balance_drift(balances) == 0
        assert is_consistent(balances)

    def test_sub_cent_shares_do_not_drift(self):
        """Thirty 1.00 expenses split 0.334/0.333/0.333 leave Bob owing 9.99."""
        expenses = [
            make_expense(f"e{i}", ALICE, "1.00", {ALICE: "0.334", BOB: "0.333", CAROL: "0.333"})
            for i in range(30)
        ]

        balances = compute_balances(MEMBERS, expenses, [])

        assert balances == {ALICE: 1998, BOB: -999, CAROL: -999}
        assert balance_drift(balances) == 0
        assert is_consistent(balances)

    def test_short_exact_split_drifts(self):
        """Exact shares short of the amount leave the group out of balance."""
        expense = make_expense("e1", ALICE, "100", {BOB: "60", CAROL: "30"})

        balances = compute_balances(MEMBERS, [expense], [])

        assert balance_drift(balances) == 1000
        assert not is_consistent(balances)

    def test_idempotent(self):
        expenses = [equal_expense("e1", ALICE, "100", MEMBERS)]
        settlements = [make_settlement("s1", BOB, ALICE, "10")]

        first = compute_balances(MEMBERS, expenses, settlements)
        second = compute_balances(MEMBERS, expenses, settlements)

        assert first == second


def test_member_balances_are_presented_in_decimal():
    expense = equal_expense("e1", ALICE, "100", MEMBERS)

    presented = to_member_balances(compute_balances(MEMBERS, [expense], []))

    assert [(b.member_id, b.balance) for b in presented] == [
        (ALICE, Decimal("66.66")),
        (BOB, Decimal("-33.33")),
        (CAROL, Decimal("-33.33")),
    ]
