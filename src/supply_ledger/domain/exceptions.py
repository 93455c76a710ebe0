"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Ledger failures carry structured attributes so callers can act on them
without parsing the message.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ItemNotFoundError(EntityNotFoundError):
    """The item is missing, inactive, or belongs to another school."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Inventory item '{item_id}' not found")


class InvalidQuantityError(ValidationError):
    """A quantity is negative, not an integer, or zero where positive is required."""

    def __init__(self, message: str, quantity: object = None) -> None:
        self.quantity = quantity
        super().__init__(message)


class InvalidTransactionTypeError(ValidationError):
    """The transaction type is unknown or not handled by the ledger."""

    def __init__(self, transaction_type: object) -> None:
        self.transaction_type = transaction_type
        super().__init__(f"Invalid transaction type: {transaction_type!r}")


class InsufficientStockError(ValidationError):
    """A check-out asked for more than the item currently holds."""

    def __init__(self, item_name: str, available: int, requested: int) -> None:
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {item_name} "
            f"(requested {requested}, have {available} available)"
        )


class PersistenceConflictError(DomainException):
    """The item changed in the store since it was read."""

    def __init__(self, item_id: str, expected_version: int, actual_version: int) -> None:
        self.item_id = item_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent update detected on item '{item_id}' "
            f"(expected version {expected_version}, found {actual_version})"
        )


class PersistenceFailureError(DomainException):
    """The store could not be read or written."""


class LedgerIntegrityError(DomainException):
    """A write would let an item's quantity drift from its transaction log."""
