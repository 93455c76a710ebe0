"""Application service: Remove Item use case (soft delete)."""

from __future__ import annotations

from supply_ledger.domain.service.ledger_engine import LedgerEngine


class RemoveItemHandler:

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    def handle(self, tenant_id: str, item_id: str) -> None:
        """Hide the item from listings; its transactions stay in the ledger."""
        self._engine.deactivate_item(tenant_id, item_id)
