"""Domain service: Ledger Engine.

The only path by which an item's quantity changes. Every change is paired
with exactly one StockTransaction, and the two are handed to the
repository's atomic ``commit_movement`` together.

Calls against the same item are serialized by a per-item lock, so two
concurrent check-outs can never both pass the sufficiency check against a
stale quantity. Across processes the repository re-checks the item's version
while it holds the store's write lock: a stale write fails with
PersistenceConflictError instead of overwriting newer stock. Nothing here
retries; the caller decides.
"""

from __future__ import annotations

import threading
import weakref
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from supply_ledger.domain.exceptions import (
    DomainException,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidTransactionTypeError,
    ItemNotFoundError,
    PersistenceConflictError,
    PersistenceFailureError,
    ValidationError,
)
from supply_ledger.domain.model.inventory import (
    DEFAULT_MAX_THRESHOLD,
    DEFAULT_MIN_THRESHOLD,
    DEFAULT_UNIT,
    InventoryItem,
)
from supply_ledger.domain.model.transaction import (
    INITIAL_STOCK_REASON,
    MANUAL_ADJUSTMENT_REASON,
    MAX_REASON_LENGTH,
    StockTransaction,
    TransactionType,
)
from supply_ledger.domain.model.value_objects import Money, Supplier
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.logging_config import LogContext, get_logger

logger = get_logger("services.ledger_engine")

LEDGER_TYPES = (
    TransactionType.CHECK_IN,
    TransactionType.CHECK_OUT,
    TransactionType.ADJUSTMENT,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class _ItemLocks:
    """One mutex per (school, item); unrelated items never wait on each other.

    A lock lives only while some caller holds it, so the registry does not
    grow with every item ID ever seen.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[tuple[str, str], threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    def for_item(self, tenant_id: str, item_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((tenant_id, item_id), threading.Lock())


class LedgerEngine:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._clock = clock or _utcnow
        self._new_id = id_factory or _new_id
        self._locks = _ItemLocks()

    # --- Transactions ---------------------------------------------------------

    def apply_transaction(
        self,
        tenant_id: str,
        item_id: str,
        transaction_type: TransactionType | str,
        quantity: int,
        actor_id: str,
        *,
        reason: str | None = None,
        notes: str | None = None,
        cost: Money | str | Decimal | None = None,
        supplier: Supplier | None = None,
        reference: str | None = None,
    ) -> StockTransaction:
        """Check in, check out, or adjust stock on one item.

        ``quantity`` is the amount to move for check-in and check-out, and
        the absolute target quantity for an adjustment.

        Raises:
            InvalidTransactionTypeError: unknown type, or ``transfer``.
            InvalidQuantityError: not an int, negative, or zero for a move.
            ItemNotFoundError: missing, inactive, or another school's item.
            InsufficientStockError: check-out larger than current stock.
            PersistenceConflictError / PersistenceFailureError: from the store.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            try:
                txn_type = TransactionType.parse(transaction_type)
                if txn_type not in LEDGER_TYPES:
                    raise InvalidTransactionTypeError(txn_type.value)
                _check_quantity(txn_type, quantity)
                _check_reason(reason)
                unit_cost = _coerce_cost(cost)

                with self._locks.for_item(tenant_id, item_id):
                    item = self._load_active(tenant_id, item_id)
                    new_quantity = _resolve_new_quantity(item, txn_type, quantity)
                    transaction = self._build_transaction(
                        item,
                        txn_type,
                        new_quantity,
                        actor_id,
                        cost=unit_cost if unit_cost is not None else item.cost,
                        reason=reason,
                        notes=notes,
                        supplier=supplier,
                        reference=reference,
                    )
                    self._commit(item, transaction)
            except (PersistenceConflictError, PersistenceFailureError):
                raise
            except DomainException as exc:
                logger.warning(
                    "stock_transaction_rejected",
                    extra={
                        "item_id": item_id,
                        "transaction_type": str(transaction_type),
                        "requested_quantity": quantity,
                        "error": type(exc).__name__,
                        "reason_text": str(exc),
                    },
                )
                raise

            logger.info(
                "stock_transaction_applied",
                extra={
                    "item_id": item_id,
                    "transaction_id": transaction.id,
                    "transaction_type": transaction.type.value,
                    "delta": transaction.quantity,
                    "previous_quantity": transaction.previous_quantity,
                    "new_quantity": transaction.new_quantity,
                },
            )
            return transaction

    # --- Item lifecycle -------------------------------------------------------

    def create_item(
        self,
        tenant_id: str,
        actor_id: str,
        *,
        category_id: str,
        name: str,
        quantity: int = 0,
        unit: str = DEFAULT_UNIT,
        min_threshold: int = DEFAULT_MIN_THRESHOLD,
        max_threshold: int = DEFAULT_MAX_THRESHOLD,
        cost: Money | str | Decimal | None = None,
        description: str | None = None,
        supplier: Supplier | None = None,
        location: str | None = None,
        barcode: str | None = None,
    ) -> tuple[InventoryItem, StockTransaction | None]:
        """Create an item; opening stock is recorded as an "Initial stock" check-in."""
        _check_quantity(TransactionType.ADJUSTMENT, quantity)
        now = self._clock()
        item = InventoryItem.create(
            id=self._new_id(),
            tenant_id=tenant_id,
            category_id=category_id,
            name=name,
            unit=unit,
            min_threshold=min_threshold,
            max_threshold=max_threshold,
            cost=_coerce_cost(cost),
            description=description,
            supplier=supplier,
            location=location,
            barcode=barcode,
            now=now,
        )

        opening: StockTransaction | None = None
        if quantity > 0:
            opening = self._build_transaction(
                item,
                TransactionType.CHECK_IN,
                quantity,
                actor_id,
                cost=item.cost,
                reason=INITIAL_STOCK_REASON,
            )
            item.record_movement(opening)

        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            self._inventory_repo.add(item, opening)
            logger.info(
                "inventory_item_created",
                extra={"item_id": item.id, "initial_quantity": item.quantity},
            )
        return item, opening

    def update_item(
        self,
        tenant_id: str,
        item_id: str,
        actor_id: str,
        changes: dict,
    ) -> tuple[InventoryItem, StockTransaction | None]:
        """Apply a general field edit.

        A ``quantity`` key is intercepted: if it differs from the current
        stock, a "Manual adjustment" transaction is written in the same
        commit as the other edits.
        """
        changes = dict(changes)
        target = changes.pop("quantity", None)
        if target is not None:
            _check_quantity(TransactionType.ADJUSTMENT, target)

        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            with self._locks.for_item(tenant_id, item_id):
                item = self._load_active(tenant_id, item_id)
                expected_version = item.version
                if changes:
                    item.update_details(changes, now=self._clock())

                adjustment: StockTransaction | None = None
                if target is not None and target != item.quantity:
                    adjustment = self._build_transaction(
                        item,
                        TransactionType.ADJUSTMENT,
                        target,
                        actor_id,
                        cost=item.cost,
                        reason=MANUAL_ADJUSTMENT_REASON,
                    )
                    item.record_movement(adjustment)
                    self._inventory_repo.commit_movement(item, adjustment, expected_version)
                elif changes:
                    self._inventory_repo.save_details(item, expected_version)

            logger.info(
                "inventory_item_updated",
                extra={
                    "item_id": item_id,
                    "fields": sorted(changes),
                    "adjustment_id": adjustment.id if adjustment else None,
                },
            )
            return item, adjustment

    def deactivate_item(self, tenant_id: str, item_id: str) -> InventoryItem:
        """Soft delete. The item's transactions are kept."""
        with LogContext.bind(tenant_id=tenant_id):
            with self._locks.for_item(tenant_id, item_id):
                item = self._load_active(tenant_id, item_id)
                expected_version = item.version
                item.deactivate(now=self._clock())
                self._inventory_repo.save_details(item, expected_version)
            logger.info("inventory_item_deactivated", extra={"item_id": item_id})
            return item

    # --- Internal helpers -----------------------------------------------------

    def _load_active(self, tenant_id: str, item_id: str) -> InventoryItem:
        item = self._inventory_repo.get_by_id(tenant_id, item_id)
        if item is None or not item.is_active:
            raise ItemNotFoundError(item_id)
        return item

    def _build_transaction(
        self,
        item: InventoryItem,
        txn_type: TransactionType,
        new_quantity: int,
        actor_id: str,
        *,
        cost: Money,
        reason: str | None = None,
        notes: str | None = None,
        supplier: Supplier | None = None,
        reference: str | None = None,
    ) -> StockTransaction:
        return StockTransaction(
            id=self._new_id(),
            tenant_id=item.tenant_id,
            item_id=item.id,
            user_id=actor_id,
            type=txn_type,
            quantity=new_quantity - item.quantity,
            previous_quantity=item.quantity,
            new_quantity=new_quantity,
            cost=cost,
            reason=_strip(reason),
            notes=_strip(notes),
            reference=_strip(reference),
            supplier=supplier,
            created_at=self._clock(),
        )

    def _commit(self, item: InventoryItem, transaction: StockTransaction) -> None:
        expected_version = item.version
        item.record_movement(transaction)
        try:
            self._inventory_repo.commit_movement(item, transaction, expected_version)
        except PersistenceConflictError as exc:
            logger.warning(
                "stock_transaction_conflict",
                extra={
                    "item_id": item.id,
                    "expected_version": exc.expected_version,
                    "actual_version": exc.actual_version,
                },
            )
            raise
        except PersistenceFailureError:
            logger.error(
                "stock_transaction_persist_failed",
                exc_info=True,
                extra={"item_id": item.id, "transaction_id": transaction.id},
            )
            raise


def _resolve_new_quantity(
    item: InventoryItem, txn_type: TransactionType, quantity: int
) -> int:
    previous = item.quantity
    if txn_type is TransactionType.CHECK_IN:
        return previous + quantity
    if txn_type is TransactionType.CHECK_OUT:
        if quantity > previous:
            raise InsufficientStockError(item.name, available=previous, requested=quantity)
        return previous - quantity
    return quantity


def _check_quantity(txn_type: TransactionType, quantity: object) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(
            f"Quantity must be an integer, got {type(quantity).__name__}", quantity
        )
    if quantity < 0:
        raise InvalidQuantityError(f"Quantity cannot be negative, got {quantity}", quantity)
    if quantity == 0 and txn_type is not TransactionType.ADJUSTMENT:
        raise InvalidQuantityError(
            f"{txn_type.value} quantity must be positive", quantity
        )


def _check_reason(reason: str | None) -> None:
    if reason is not None and len(reason.strip()) > MAX_REASON_LENGTH:
        raise ValidationError(f"Reason must be less than {MAX_REASON_LENGTH} characters")


def _coerce_cost(cost: Money | str | Decimal | None) -> Money | None:
    if cost is None or isinstance(cost, Money):
        return cost
    return Money.of(cost)


def _strip(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
