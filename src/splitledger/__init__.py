"""SplitLedger - Group expense balances, debt simplification and spending analytics."""

__version__ = "0.1.0"

from .analytics import build_dashboard
from .config import Settings, load_settings
from .ledger import compute_balances
from .models import (
    BalanceReport,
    Dashboard,
    Expense,
    ExpenseCategory,
    Group,
    MemberId,
    Participant,
    Settlement,
    SimplifiedDebt,
    SplitType,
)
from .service import LedgerService, build_balance_report
from .simplifier import simplify_debts
from .splits import build_expense, compute_shares
from .store import SnapshotRecordStore, load_snapshot

__all__ = [
    "Settings",
    "load_settings",
    "BalanceReport",
    "Dashboard",
    "Expense",
    "ExpenseCategory",
    "Group",
    "MemberId",
    "Participant",
    "Settlement",
    "SimplifiedDebt",
    "SplitType",
    "compute_balances",
    "simplify_debts",
    "build_dashboard",
    "build_balance_report",
    "compute_shares",
    "build_expense",
    "LedgerService",
    "SnapshotRecordStore",
    "load_snapshot",
]
