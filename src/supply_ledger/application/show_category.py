"""Application service: Show Category use case (query)."""

from __future__ import annotations

from supply_ledger.application.dto import CategoryDTO, category_to_dto
from supply_ledger.domain.exceptions import EntityNotFoundError
from supply_ledger.domain.model.category import Category
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.repository.filters import ItemQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository


def load_active_category(
    category_repo: CategoryRepository, tenant_id: str, category_id: str
) -> Category:
    category = category_repo.get_by_id(tenant_id, category_id)
    if category is None or not category.is_active:
        raise EntityNotFoundError(f"Category '{category_id}' not found")
    return category


def active_item_count(
    inventory_repo: InventoryRepository, tenant_id: str, category_id: str
) -> int:
    return len(
        inventory_repo.list_matching(ItemQuery(tenant_id=tenant_id, category_id=category_id))
    )


class ShowCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._category_repo = category_repo
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str, category_id: str) -> CategoryDTO:
        category = load_active_category(self._category_repo, tenant_id, category_id)
        return category_to_dto(
            category, active_item_count(self._inventory_repo, tenant_id, category_id)
        )
