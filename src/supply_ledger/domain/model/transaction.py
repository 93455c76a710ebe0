"""StockTransaction: one immutable entry in an item's ledger.

Transactions are never edited or deleted once written. An item's current
quantity is the ``new_quantity`` of its latest transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from supply_ledger.domain.exceptions import (
    InvalidTransactionTypeError,
    LedgerIntegrityError,
)
from supply_ledger.domain.model.value_objects import Money, Supplier, TransferLocation

INITIAL_STOCK_REASON = "Initial stock"
MANUAL_ADJUSTMENT_REASON = "Manual adjustment"
MAX_REASON_LENGTH = 500


class TransactionType(Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"

    @staticmethod
    def parse(value: str | TransactionType) -> TransactionType:
        if isinstance(value, TransactionType):
            return value
        try:
            return TransactionType(value)
        except ValueError:
            raise InvalidTransactionTypeError(value) from None


@dataclass(frozen=True)
class StockTransaction:
    """A single quantity movement on one inventory item.

    Invariants:
    - ``previous_quantity + quantity == new_quantity``
    - ``new_quantity`` is never negative
    """

    id: str
    tenant_id: str
    item_id: str
    user_id: str
    type: TransactionType
    quantity: int  # signed delta
    previous_quantity: int
    new_quantity: int
    cost: Money = field(default_factory=Money.zero)
    reason: str | None = None
    notes: str | None = None
    reference: str | None = None
    supplier: Supplier | None = None
    location: TransferLocation | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.previous_quantity + self.quantity != self.new_quantity:
            raise LedgerIntegrityError(
                f"Transaction {self.id} does not balance: "
                f"{self.previous_quantity} + {self.quantity} != {self.new_quantity}"
            )
        if self.new_quantity < 0:
            raise LedgerIntegrityError(
                f"Transaction {self.id} would leave a negative quantity ({self.new_quantity})"
            )

    @property
    def total_value(self) -> Money:
        return self.cost * abs(self.quantity)
