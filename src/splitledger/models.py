"""Pydantic domain models for SplitLedger."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field

MemberId = NewType("MemberId", str)
GroupId = NewType("GroupId", str)


class SplitType(str, Enum):
    """How an expense amount is divided between participants."""

    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"
    SHARES = "shares"


class ExpenseCategory(str, Enum):
    """Category tag of an expense."""

    FOOD = "food"
    TRANSPORT = "transport"
    ACCOMMODATION = "accommodation"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    TRAVEL = "travel"
    GROCERIES = "groceries"
    SPORTS = "sports"
    OTHER = "other"


# ============================================================================
# Record Models
# ============================================================================


class Participant(BaseModel):
    """A member's share of an expense."""

    model_config = ConfigDict(frozen=True)

    member_id: MemberId
    share: Decimal = Field(ge=0)


class Expense(BaseModel):
    """A shared expense advanced by one member on behalf of participants."""

    model_config = ConfigDict(frozen=True)

    id: str
    group_id: GroupId | None = None
    title: str = Field(min_length=1, max_length=200)
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    paid_by: MemberId
    participants: tuple[Participant, ...] = Field(min_length=1)
    split_type: SplitType = SplitType.EQUAL
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: datetime
    notes: str | None = None
    is_deleted: bool = False

    def share_of(self, member_id: MemberId) -> Decimal | None:
        """Get the recorded share for a member, or None if not a participant."""
        for participant in self.participants:
            if participant.member_id == member_id:
                return participant.share
        return None


class Settlement(BaseModel):
    """A direct payment from one member to another."""

    model_config = ConfigDict(frozen=True)

    id: str
    group_id: GroupId | None = None
    paid_by: MemberId
    paid_to: MemberId
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    date: datetime
    notes: str | None = None


class Group(BaseModel):
    """A group of members sharing expenses in one currency."""

    model_config = ConfigDict(frozen=True)

    id: GroupId
    name: str
    currency: str | None = None  # None falls back to the configured default
    members: tuple[MemberId, ...] = ()
    is_archived: bool = False


# ============================================================================
# Result Models
# ============================================================================


class MemberBalance(BaseModel):
    """Net balance of one member (positive = is owed, negative = owes)."""

    model_config = ConfigDict(frozen=True)

    member_id: MemberId
    balance: Decimal


class SimplifiedDebt(BaseModel):
    """A single payment that settles (part of) a debt."""

    model_config = ConfigDict(frozen=True)

    from_member: MemberId
    to_member: MemberId
    amount: Decimal = Field(gt=0)


class BalanceReport(BaseModel):
    """Balances of a group together with the payments that settle them."""

    model_config = ConfigDict(frozen=True)

    member_balances: tuple[MemberBalance, ...]
    simplified_debts: tuple[SimplifiedDebt, ...]


class DashboardStats(BaseModel):
    """Headline totals for a member across all their groups."""

    model_config = ConfigDict(frozen=True)

    total_spent: Decimal
    total_owed: Decimal
    total_owing: Decimal
    net_balance: Decimal
    group_count: int
    expense_count: int


class CategoryAmount(BaseModel):
    """Sum of a member's shares in one category."""

    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory
    amount: Decimal


class MonthlySpend(BaseModel):
    """Amount a member paid out in one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str  # display label, e.g. "Oct 26"
    key: str  # "YYYY-MM"
    spent: Decimal


class Dashboard(BaseModel):
    """Personal analytics for one member."""

    model_config = ConfigDict(frozen=True)

    stats: DashboardStats
    category_data: tuple[CategoryAmount, ...]
    monthly_data: tuple[MonthlySpend, ...]
