"""Output events for real-time clients.

The ledger never pushes anything itself. Orchestration code returns these
events and whoever owns the client connections delivers them.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import UngroupedRecordError
from .models import BalanceReport, Expense, Group, GroupId, MemberId, Settlement

EventType = Literal[
    "expense-added",
    "expense-updated",
    "expense-deleted",
    "settlement-created",
    "group-created",
    "member-added",
    "balances-updated",
]

BROADCAST_ROOM = "*"


class LedgerEvent(BaseModel):
    """A message addressed to the clients watching a group."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    room: str
    payload: dict[str, Any] = Field(default_factory=dict)


def group_room(group_id: GroupId) -> str:
    """Room name for clients watching a group."""
    return f"group-{group_id}"


def record_group(record: Expense | Settlement) -> GroupId:
    """
    Group whose clients should hear about a record.

    Raises:
        UngroupedRecordError: If the record does not belong to a group
    """
    if record.group_id is None:
        kind = "expense" if isinstance(record, Expense) else "settlement"
        raise UngroupedRecordError(kind, record.id)
    return record.group_id


def balances_updated(group_id: GroupId, report: BalanceReport) -> LedgerEvent:
    return LedgerEvent(
        type="balances-updated",
        room=group_room(group_id),
        payload={"group_id": group_id, **report.model_dump(mode="json")},
    )


def expense_added(expense: Expense) -> LedgerEvent:
    return _expense_event("expense-added", expense)


def expense_updated(expense: Expense) -> LedgerEvent:
    return _expense_event("expense-updated", expense)


def expense_deleted(group_id: GroupId, expense_id: str) -> LedgerEvent:
    return LedgerEvent(
        type="expense-deleted", room=group_room(group_id), payload={"id": expense_id}
    )


def settlement_created(settlement: Settlement) -> LedgerEvent:
    return LedgerEvent(
        type="settlement-created",
        room=group_room(record_group(settlement)),
        payload=settlement.model_dump(mode="json"),
    )


def member_added(group_id: GroupId, member_id: MemberId) -> LedgerEvent:
    return LedgerEvent(
        type="member-added",
        room=group_room(group_id),
        payload={"group_id": group_id, "member_id": member_id},
    )


def _expense_event(event_type: EventType, expense: Expense) -> LedgerEvent:
    return LedgerEvent(
        type=event_type,
        room=group_room(record_group(expense)),
        payload=expense.model_dump(mode="json"),
    )


def group_created(group: Group) -> LedgerEvent:
    # New groups have no watchers yet, so this goes to every client.
    return LedgerEvent(
        type="group-created",
        room=BROADCAST_ROOM,
        payload=group.model_dump(mode="json"),
    )
