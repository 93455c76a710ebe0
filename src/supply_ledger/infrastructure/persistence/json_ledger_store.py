"""JSON-file-backed implementation of the inventory and transaction repositories.

Items and transactions share one file so that a stock movement is a single
write. Every write re-reads the ledger while holding the file lock, so the
version check compares against what is on disk right now, whichever
process wrote it last.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from supply_ledger.domain.exceptions import (
    LedgerIntegrityError,
    PersistenceConflictError,
    ValidationError,
)
from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.transaction import StockTransaction, TransactionType
from supply_ledger.domain.model.value_objects import Money, Supplier, TransferLocation
from supply_ledger.domain.repository.filters import ItemQuery, TransactionQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.domain.repository.transaction_repository import TransactionRepository
from supply_ledger.infrastructure.persistence.json_file import JsonFile
from supply_ledger.logging_config import get_logger

logger = get_logger("persistence.json_ledger_store")


class JsonLedgerStore(InventoryRepository, TransactionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(
            file_path, "ledger", empty=lambda: {"items": [], "transactions": []}
        )

    # --- InventoryRepository interface ----------------------------------------

    def get_by_id(self, tenant_id: str, item_id: str) -> InventoryItem | None:
        for raw in self._load_raw()["items"]:
            if raw["id"] == item_id and raw["tenant_id"] == tenant_id:
                return self._item_to_domain(raw)
        return None

    def list_matching(self, query: ItemQuery) -> list[InventoryItem]:
        items = [self._item_to_domain(raw) for raw in self._load_raw()["items"]]
        return sorted(
            (item for item in items if query.matches(item)),
            key=lambda item: item.name.lower(),
        )

    def add(self, item: InventoryItem, opening: StockTransaction | None = None) -> None:
        with self._file.locked():
            ledger = self._load_raw()
            if any(raw["id"] == item.id for raw in ledger["items"]):
                raise ValidationError(f"Inventory item '{item.id}' already exists")
            if opening is not None:
                if opening.item_id != item.id or opening.new_quantity != item.quantity:
                    raise LedgerIntegrityError(
                        f"Opening transaction does not match item '{item.id}'"
                    )
                ledger["transactions"].append(self._txn_to_raw(opening))
            elif item.quantity != 0:
                raise LedgerIntegrityError(
                    f"Item '{item.id}' has stock but no opening transaction"
                )
            ledger["items"].append(self._item_to_raw(item, version=1))
            self._persist_raw(ledger)
            item.version = 1

    def save_details(self, item: InventoryItem, expected_version: int) -> None:
        with self._file.locked():
            ledger = self._load_raw()
            index, stored = self._locate(ledger, item, expected_version)
            if stored["quantity"] != item.quantity:
                raise LedgerIntegrityError(
                    f"Quantity of '{item.name}' changed without a transaction "
                    f"({stored['quantity']} -> {item.quantity})"
                )
            ledger["items"][index] = self._item_to_raw(item, version=expected_version + 1)
            self._persist_raw(ledger)
            item.version = expected_version + 1

    def commit_movement(
        self,
        item: InventoryItem,
        transaction: StockTransaction,
        expected_version: int,
    ) -> None:
        with self._file.locked():
            ledger = self._load_raw()
            index, stored = self._locate(ledger, item, expected_version)
            if (
                transaction.item_id != item.id
                or transaction.previous_quantity != stored["quantity"]
                or transaction.new_quantity != item.quantity
            ):
                raise LedgerIntegrityError(
                    f"Transaction {transaction.id} does not match the stored "
                    f"quantity of '{item.name}'"
                )
            ledger["transactions"].append(self._txn_to_raw(transaction))
            ledger["items"][index] = self._item_to_raw(item, version=expected_version + 1)
            self._persist_raw(ledger)
            item.version = expected_version + 1
            logger.debug(
                "movement_committed",
                extra={"item_id": item.id, "transaction_id": transaction.id},
            )

    # --- TransactionRepository interface --------------------------------------

    def get_transaction(self, tenant_id: str, transaction_id: str) -> StockTransaction | None:
        for raw in self._load_raw()["transactions"]:
            if raw["id"] == transaction_id and raw["tenant_id"] == tenant_id:
                return self._txn_to_domain(raw)
        return None

    def list_transactions(self, query: TransactionQuery) -> list[StockTransaction]:
        rows = [self._txn_to_domain(raw) for raw in reversed(self._load_raw()["transactions"])]
        matching = [txn for txn in rows if query.matches(txn)]
        # Stable sort keeps newer writes first among equal timestamps.
        matching.sort(key=lambda txn: txn.created_at, reverse=True)
        return matching

    # --- Internal helpers -----------------------------------------------------

    def _locate(
        self, ledger: dict, item: InventoryItem, expected_version: int
    ) -> tuple[int, dict]:
        for index, raw in enumerate(ledger["items"]):
            if raw["id"] == item.id and raw["tenant_id"] == item.tenant_id:
                if raw["version"] != expected_version:
                    raise PersistenceConflictError(item.id, expected_version, raw["version"])
                return index, raw
        raise PersistenceConflictError(item.id, expected_version, 0)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _item_to_raw(item: InventoryItem, version: int | None = None) -> dict:
        return {
            "id": item.id,
            "tenant_id": item.tenant_id,
            "category_id": item.category_id,
            "name": item.name,
            "description": item.description,
            "quantity": item.quantity,
            "unit": item.unit,
            "min_threshold": item.min_threshold,
            "max_threshold": item.max_threshold,
            "cost": str(item.cost.amount),
            "currency": item.cost.currency,
            "supplier": item.supplier.to_raw() if item.supplier else None,
            "location": item.location,
            "barcode": item.barcode,
            "is_active": item.is_active,
            "version": item.version if version is None else version,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
        }

    @staticmethod
    def _item_to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            id=raw["id"],
            tenant_id=raw["tenant_id"],
            category_id=raw["category_id"],
            name=raw["name"],
            description=raw.get("description"),
            quantity=raw["quantity"],
            unit=raw.get("unit", "pieces"),
            min_threshold=raw.get("min_threshold", 5),
            max_threshold=raw.get("max_threshold", 100),
            cost=Money(Decimal(raw.get("cost", "0")), raw.get("currency", "USD")),
            supplier=Supplier.from_raw(raw.get("supplier")),
            location=raw.get("location"),
            barcode=raw.get("barcode"),
            is_active=raw.get("is_active", True),
            version=raw.get("version", 1),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    @staticmethod
    def _txn_to_raw(txn: StockTransaction) -> dict:
        return {
            "id": txn.id,
            "tenant_id": txn.tenant_id,
            "item_id": txn.item_id,
            "user_id": txn.user_id,
            "type": txn.type.value,
            "quantity": txn.quantity,
            "previous_quantity": txn.previous_quantity,
            "new_quantity": txn.new_quantity,
            "cost": str(txn.cost.amount),
            "currency": txn.cost.currency,
            "reason": txn.reason,
            "notes": txn.notes,
            "reference": txn.reference,
            "supplier": txn.supplier.to_raw() if txn.supplier else None,
            "location": txn.location.to_raw() if txn.location else None,
            "created_at": txn.created_at.isoformat(),
        }

    @staticmethod
    def _txn_to_domain(raw: dict) -> StockTransaction:
        return StockTransaction(
            id=raw["id"],
            tenant_id=raw["tenant_id"],
            item_id=raw["item_id"],
            user_id=raw["user_id"],
            type=TransactionType(raw["type"]),
            quantity=raw["quantity"],
            previous_quantity=raw["previous_quantity"],
            new_quantity=raw["new_quantity"],
            cost=Money(Decimal(raw.get("cost", "0")), raw.get("currency", "USD")),
            reason=raw.get("reason"),
            notes=raw.get("notes"),
            reference=raw.get("reference"),
            supplier=Supplier.from_raw(raw.get("supplier")),
            location=TransferLocation.from_raw(raw.get("location")),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        ledger = self._file.read()
        ledger.setdefault("items", [])
        ledger.setdefault("transactions", [])
        return ledger

    def _persist_raw(self, ledger: dict) -> None:
        self._file.write(ledger)
