"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from supply_ledger.domain.model.category import Category
from supply_ledger.domain.model.inventory import (
    DEFAULT_MAX_THRESHOLD,
    DEFAULT_MIN_THRESHOLD,
    DEFAULT_UNIT,
    InventoryItem,
)
from supply_ledger.domain.model.transaction import StockTransaction

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class NewItemSpec:
    """Input: a supply to start tracking."""

    name: str
    category_id: str
    quantity: int = 0
    unit: str = DEFAULT_UNIT
    min_threshold: int = DEFAULT_MIN_THRESHOLD
    max_threshold: int = DEFAULT_MAX_THRESHOLD
    cost: str = "0"
    description: str | None = None
    supplier_name: str | None = None
    supplier_contact: str | None = None
    supplier_email: str | None = None
    location: str | None = None
    barcode: str | None = None


@dataclass(frozen=True)
class ItemDTO:
    """Output: an inventory item as displayed to the user."""

    id: str
    name: str
    category_id: str
    quantity: int
    unit: str
    min_threshold: int
    max_threshold: int
    unit_cost: str  # formatted, e.g. "$1.25"
    total_value: str
    stock_status: str
    location: str | None
    is_active: bool
    supplier: str | None = None


@dataclass(frozen=True)
class TransactionDTO:
    """Output: a single ledger entry."""

    id: str
    item_id: str
    item_name: str
    user_id: str
    type: str
    quantity: int
    previous_quantity: int
    new_quantity: int
    unit_cost: str
    total_value: str
    reason: str | None
    notes: str | None
    created_at: str
    reference: str | None = None
    supplier: str | None = None


@dataclass(frozen=True)
class CategoryDTO:

    id: str
    name: str
    description: str | None
    color: str
    item_count: int


def item_to_dto(item: InventoryItem) -> ItemDTO:
    return ItemDTO(
        id=item.id,
        name=item.name,
        category_id=item.category_id,
        quantity=item.quantity,
        unit=item.unit,
        min_threshold=item.min_threshold,
        max_threshold=item.max_threshold,
        unit_cost=str(item.cost),
        total_value=str(item.total_value),
        stock_status=item.stock_status.value,
        location=item.location,
        is_active=item.is_active,
        supplier=item.supplier.name if item.supplier else None,
    )


def category_to_dto(category: Category, item_count: int) -> CategoryDTO:
    return CategoryDTO(
        id=category.id,
        name=category.name,
        description=category.description,
        color=category.color,
        item_count=item_count,
    )


def transaction_to_dto(txn: StockTransaction, item_name: str) -> TransactionDTO:
    return TransactionDTO(
        id=txn.id,
        item_id=txn.item_id,
        item_name=item_name,
        user_id=txn.user_id,
        type=txn.type.value,
        quantity=txn.quantity,
        previous_quantity=txn.previous_quantity,
        new_quantity=txn.new_quantity,
        unit_cost=str(txn.cost),
        total_value=str(txn.total_value),
        reason=txn.reason,
        notes=txn.notes,
        created_at=txn.created_at.strftime(TIMESTAMP_FORMAT),
        reference=txn.reference,
        supplier=txn.supplier.name if txn.supplier else None,
    )
