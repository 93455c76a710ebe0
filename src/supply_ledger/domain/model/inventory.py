"""InventoryItem aggregate: one supply line stocked by a school.

The item's ``quantity`` is a materialized view of its transaction log.
It only moves through ``record_movement``, which the ledger engine calls
with the transaction that explains the change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from supply_ledger.domain.exceptions import LedgerIntegrityError, ValidationError
from supply_ledger.domain.model.stock_status import StockStatus, classify_stock
from supply_ledger.domain.model.transaction import StockTransaction
from supply_ledger.domain.model.value_objects import Money, Supplier

DEFAULT_UNIT = "pieces"
DEFAULT_MIN_THRESHOLD = 5
DEFAULT_MAX_THRESHOLD = 100

# Fields a general-purpose edit may touch. Quantity moves only through the ledger.
EDITABLE_FIELDS = frozenset({
    "name",
    "description",
    "category_id",
    "unit",
    "min_threshold",
    "max_threshold",
    "cost",
    "supplier",
    "location",
    "barcode",
})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InventoryItem:
    """Aggregate root for a stocked supply.

    Invariants:
    - ``quantity`` is never negative
    - ``max_threshold`` >= ``min_threshold`` (checked on create and edit)
    - ``quantity`` changes only together with a StockTransaction
    """

    id: str
    tenant_id: str
    category_id: str
    name: str
    quantity: int = 0
    unit: str = DEFAULT_UNIT
    min_threshold: int = DEFAULT_MIN_THRESHOLD
    max_threshold: int = DEFAULT_MAX_THRESHOLD
    cost: Money = field(default_factory=Money.zero)
    description: str | None = None
    supplier: Supplier | None = None
    location: str | None = None
    barcode: str | None = None
    is_active: bool = True
    version: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW items only) ------------------------------------

    @staticmethod
    def create(
        id: str,
        tenant_id: str,
        category_id: str,
        name: str,
        unit: str = DEFAULT_UNIT,
        min_threshold: int = DEFAULT_MIN_THRESHOLD,
        max_threshold: int = DEFAULT_MAX_THRESHOLD,
        cost: Money | None = None,
        description: str | None = None,
        supplier: Supplier | None = None,
        location: str | None = None,
        barcode: str | None = None,
        now: datetime | None = None,
    ) -> InventoryItem:
        """Create an empty item, enforcing all field rules.

        Opening stock is recorded afterwards as a check-in by the ledger
        engine, so a new item always starts at zero.
        """
        timestamp = now or _utcnow()
        item = InventoryItem(
            id=id,
            tenant_id=tenant_id,
            category_id=category_id,
            name=_clean(name),
            unit=_clean(unit),
            min_threshold=min_threshold,
            max_threshold=max_threshold,
            cost=cost or Money.zero(),
            description=_clean_optional(description),
            supplier=supplier,
            location=_clean_optional(location),
            barcode=_clean_optional(barcode),
            created_at=timestamp,
            updated_at=timestamp,
        )
        item._validate()
        return item

    # --- Derived values -------------------------------------------------------

    @property
    def stock_status(self) -> StockStatus:
        return classify_stock(self.quantity, self.min_threshold, self.max_threshold)

    @property
    def total_value(self) -> Money:
        return self.cost * self.quantity

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_threshold

    # --- Ledger ---------------------------------------------------------------

    def record_movement(self, transaction: StockTransaction) -> None:
        """Apply a ledger transaction to the materialized quantity."""
        if transaction.item_id != self.id:
            raise LedgerIntegrityError(
                f"Transaction {transaction.id} belongs to item "
                f"'{transaction.item_id}', not '{self.id}'"
            )
        if transaction.previous_quantity != self.quantity:
            raise LedgerIntegrityError(
                f"Transaction {transaction.id} starts from {transaction.previous_quantity} "
                f"but {self.name} holds {self.quantity}"
            )
        self.quantity = transaction.new_quantity
        self.updated_at = transaction.created_at

    # --- Edits ----------------------------------------------------------------

    def update_details(self, changes: dict, now: datetime | None = None) -> None:
        """Apply a general field edit.

        Quantity is not editable here; the ledger engine turns a quantity
        change into an adjustment transaction.
        """
        if "quantity" in changes:
            raise LedgerIntegrityError(
                "Quantity cannot be edited directly; record a transaction instead"
            )
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown item field(s): {', '.join(sorted(unknown))}"
            )

        for name, value in changes.items():
            if name in ("name", "unit"):
                value = _clean(value)
            elif name in ("description", "location", "barcode"):
                value = _clean_optional(value)
            elif name == "cost" and not isinstance(value, Money):
                value = Money.of(value)
            elif name == "supplier":
                value = _coerce_supplier(value)
            setattr(self, name, value)

        self._validate()
        self.updated_at = now or _utcnow()

    def deactivate(self, now: datetime | None = None) -> None:
        """Soft delete. History stays; the item disappears from listings."""
        if not self.is_active:
            raise ValidationError(f"Item '{self.name}' is already inactive")
        self.is_active = False
        self.updated_at = now or _utcnow()

    # --- Internal helpers -----------------------------------------------------

    def _validate(self) -> None:
        if not self.name:
            raise ValidationError("Item name is required")
        if not self.unit:
            raise ValidationError("Unit is required")
        if not self.category_id:
            raise ValidationError("Category is required")
        for label, value in (
            ("Minimum threshold", self.min_threshold),
            ("Maximum threshold", self.max_threshold),
        ):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(f"{label} must be a non-negative integer")
        if self.max_threshold < self.min_threshold:
            raise ValidationError(
                f"Maximum threshold ({self.max_threshold}) cannot be below "
                f"minimum threshold ({self.min_threshold})"
            )
        if self.quantity < 0:
            raise ValidationError("Quantity cannot be negative")


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _clean_optional(value: str | None) -> str | None:
    cleaned = _clean(value)
    return cleaned or None


def _coerce_supplier(value: Supplier | dict | None) -> Supplier | None:
    """``None`` clears the supplier; a dict needs at least a name."""
    if value is None or isinstance(value, Supplier):
        return value
    if isinstance(value, dict):
        return Supplier(
            name=_clean(value.get("name")),
            contact=_clean_optional(value.get("contact")),
            email=_clean_optional(value.get("email")),
        )
    raise ValidationError(f"Invalid supplier: {value!r}")
