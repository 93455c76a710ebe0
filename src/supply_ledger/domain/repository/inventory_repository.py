"""Abstract repository for the InventoryItem aggregate and its ledger.

Items and their transactions live behind one repository because a
quantity change and the transaction explaining it must be written as a
single unit. Concrete stores must make ``add`` and ``commit_movement``
atomic: either the item and its transaction are both visible, or
neither is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.transaction import StockTransaction
from supply_ledger.domain.repository.filters import ItemQuery


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, tenant_id: str, item_id: str) -> InventoryItem | None:
        """Return the school's item (active or not), or None."""

    @abstractmethod
    def list_matching(self, query: ItemQuery) -> list[InventoryItem]:
        """Return the items matching the query, sorted by name."""

    @abstractmethod
    def add(self, item: InventoryItem, opening: StockTransaction | None = None) -> None:
        """Persist a new item together with its opening-stock transaction."""

    @abstractmethod
    def save_details(self, item: InventoryItem, expected_version: int) -> None:
        """Persist non-quantity edits.

        Raises LedgerIntegrityError if the stored quantity differs from
        ``item.quantity`` and PersistenceConflictError on a version mismatch.
        """

    @abstractmethod
    def commit_movement(
        self,
        item: InventoryItem,
        transaction: StockTransaction,
        expected_version: int,
    ) -> None:
        """Atomically save the item and append its transaction.

        Raises PersistenceConflictError if the stored version is no longer
        ``expected_version``. On success ``item.version`` is advanced.
        """
