"""Record store boundary.

The ledger reads groups, expenses and settlements through `RecordStore`. The
bundled implementation is a read-only snapshot loaded from a JSON document:

    {
      "groups": [{"id": "g1", "name": "Trip", "members": ["alice", "bob"]}],
      "expenses": [{"id": "e1", "group_id": "g1", "title": "Dinner", ...}],
      "settlements": [{"id": "s1", "group_id": "g1", "paid_by": "bob", ...}]
    }
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import GroupNotFoundError, LedgerIntegrityError, RecordStoreError
from .models import Expense, Group, GroupId, MemberId, Settlement

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordStore(Protocol):
    """Read access to a consistent snapshot of ledger records."""

    def get_group(self, group_id: GroupId) -> Group: ...

    def list_groups_for_member(self, member_id: MemberId) -> list[Group]: ...

    def list_expenses(self, group_ids: Iterable[GroupId]) -> list[Expense]: ...

    def list_settlements(self, group_ids: Iterable[GroupId]) -> list[Settlement]: ...


class SnapshotRecordStore:
    """In-memory record store over a fixed set of records."""

    def __init__(
        self,
        groups: Iterable[Group] = (),
        expenses: Iterable[Expense] = (),
        settlements: Iterable[Settlement] = (),
    ):
        """Initialize the store."""
        self.groups = {group.id: group for group in groups}
        self.expenses = list(expenses)
        self.settlements = list(settlements)

    def get_group(self, group_id: GroupId) -> Group:
        group = self.groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    def list_groups_for_member(self, member_id: MemberId) -> list[Group]:
        """Non-archived groups the member belongs to."""
        return [
            group
            for group in self.groups.values()
            if not group.is_archived and member_id in group.members
        ]

    def list_expenses(self, group_ids: Iterable[GroupId]) -> list[Expense]:
        """Non-deleted expenses of the given groups, in stored order."""
        wanted = set(group_ids)
        return [
            expense
            for expense in self.expenses
            if expense.group_id in wanted and not expense.is_deleted
        ]

    def list_settlements(self, group_ids: Iterable[GroupId]) -> list[Settlement]:
        """Settlements of the given groups, in stored order."""
        wanted = set(group_ids)
        return [s for s in self.settlements if s.group_id in wanted]


def _parse_records(
    model: type[RecordT], kind: str, raw_records: Any
) -> list[RecordT]:
    """
    Validate a list of raw records.

    Raises:
        LedgerIntegrityError: If any record fails validation
    """
    if not isinstance(raw_records, list):
        raise RecordStoreError(f"Expected a list of {kind} records")

    records = []
    for raw in raw_records:
        record_id = raw.get("id") if isinstance(raw, dict) else None
        try:
            records.append(model.model_validate(raw))
        except ValidationError as e:
            raise LedgerIntegrityError(
                kind, str(record_id) if record_id is not None else None, str(e)
            ) from e
    return records


def parse_snapshot(data: dict[str, Any]) -> SnapshotRecordStore:
    """
    Build a record store from a decoded snapshot document.

    Args:
        data: Mapping with optional "groups", "expenses" and "settlements" lists

    Returns:
        Record store over the validated records
    """
    store = SnapshotRecordStore(
        groups=_parse_records(Group, "group", data.get("groups", [])),
        expenses=_parse_records(Expense, "expense", data.get("expenses", [])),
        settlements=_parse_records(
            Settlement, "settlement", data.get("settlements", [])
        ),
    )
    logger.info(
        f"Loaded {len(store.groups)} groups, {len(store.expenses)} expenses, "
        f"{len(store.settlements)} settlements"
    )
    return store


def load_snapshot(path: Path) -> SnapshotRecordStore:
    """
    Load a record store from a JSON snapshot file.

    Raises:
        RecordStoreError: If the file is missing or not valid JSON
        LedgerIntegrityError: If a record fails validation
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise RecordStoreError(f"Ledger file not found: {path}") from e
    except OSError as e:
        raise RecordStoreError(f"Cannot read ledger file {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordStoreError(f"Ledger file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecordStoreError(f"Ledger file {path} must contain a JSON object")

    return parse_snapshot(data)
