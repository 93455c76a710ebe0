"""Application service: Record Transaction use case.

Entry point for check-in, check-out and adjustment requests. The caller
is expected to have authenticated ``actor_id`` and checked permissions.
"""

from __future__ import annotations

from supply_ledger.application.dto import TransactionDTO, transaction_to_dto
from supply_ledger.domain.model.transaction import TransactionType
from supply_ledger.domain.model.value_objects import Supplier
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.domain.service.ledger_engine import LedgerEngine


class RecordTransactionHandler:

    def __init__(self, engine: LedgerEngine, inventory_repo: InventoryRepository) -> None:
        self._engine = engine
        self._inventory_repo = inventory_repo

    def handle(
        self,
        tenant_id: str,
        item_id: str,
        transaction_type: TransactionType | str,
        quantity: int,
        actor_id: str,
        reason: str | None = None,
        notes: str | None = None,
        cost: str | None = None,
        supplier_name: str | None = None,
        supplier_contact: str | None = None,
        reference: str | None = None,
    ) -> TransactionDTO:
        supplier = None
        if supplier_name:
            supplier = Supplier(name=supplier_name, contact=supplier_contact)

        txn = self._engine.apply_transaction(
            tenant_id,
            item_id,
            transaction_type,
            quantity,
            actor_id,
            reason=reason,
            notes=notes,
            cost=cost,
            supplier=supplier,
            reference=reference,
        )

        item = self._inventory_repo.get_by_id(tenant_id, item_id)
        return transaction_to_dto(txn, item.name if item else item_id)
