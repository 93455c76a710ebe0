"""Application service: List Categories use case (query)."""

from __future__ import annotations

from collections import Counter

from supply_ledger.application.dto import CategoryDTO, category_to_dto
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.repository.filters import ItemQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository


class ListCategoriesHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._category_repo = category_repo
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str) -> list[CategoryDTO]:
        counts = Counter(
            item.category_id
            for item in self._inventory_repo.list_matching(ItemQuery(tenant_id=tenant_id))
        )
        return [
            category_to_dto(c, counts.get(c.id, 0))
            for c in self._category_repo.list_active(tenant_id)
        ]
