"""Application service: Show Inventory use cases (queries)."""

from __future__ import annotations

from dataclasses import dataclass

from supply_ledger.application.dto import (
    ItemDTO,
    TransactionDTO,
    item_to_dto,
    transaction_to_dto,
)
from supply_ledger.domain.exceptions import ItemNotFoundError
from supply_ledger.domain.model.stock_status import StockStatus
from supply_ledger.domain.repository.filters import ItemQuery, TransactionQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.domain.repository.transaction_repository import TransactionRepository


@dataclass(frozen=True)
class ItemDetailDTO:
    item: ItemDTO
    history: list[TransactionDTO]


class ShowInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        tenant_id: str,
        category_id: str | None = None,
        status: StockStatus | str | None = None,
        search: str | None = None,
    ) -> list[ItemDTO]:
        query = ItemQuery(
            tenant_id=tenant_id,
            category_id=category_id,
            status=StockStatus.parse(status) if status else None,
            search=search,
        )
        return [item_to_dto(item) for item in self._inventory_repo.list_matching(query)]


class ShowItemHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        transaction_repo: TransactionRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._transaction_repo = transaction_repo

    def handle(self, tenant_id: str, item_id: str, history_limit: int = 10) -> ItemDetailDTO:
        """Return the item and its most recent transactions, newest first."""
        item = self._inventory_repo.get_by_id(tenant_id, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        history = self._transaction_repo.list_transactions(
            TransactionQuery(tenant_id=tenant_id, item_id=item_id)
        )
        return ItemDetailDTO(
            item=item_to_dto(item),
            history=[transaction_to_dto(t, item.name) for t in history[:history_limit]],
        )
