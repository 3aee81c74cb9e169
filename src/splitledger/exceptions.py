"""Custom exceptions for SplitLedger."""


class SplitLedgerError(Exception):
    """Base exception for all SplitLedger errors."""

    pass


class ConfigurationError(SplitLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class SplitError(SplitLedgerError):
    """Raised when an expense amount cannot be split as requested."""

    pass


class LedgerIntegrityError(SplitLedgerError):
    """Raised when a stored record violates the ledger contract.

    Not retryable: the record itself has to be fixed.
    """

    def __init__(self, record_kind: str, record_id: str | None, detail: str):
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(
            f"Invalid {record_kind} record {record_id or '<unknown>'}: {detail}"
        )


class RecordStoreError(SplitLedgerError):
    """Raised when the record store cannot be read."""

    pass


class GroupNotFoundError(RecordStoreError):
    """Raised when a group is not present in the record store."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Group {group_id} not found")


class UngroupedRecordError(SplitLedgerError):
    """Raised when a change event is requested for a record with no group."""

    def __init__(self, record_kind: str, record_id: str):
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(
            f"{record_kind.capitalize()} {record_id} has no group to notify"
        )
