"""Application service: Remove Category use case (soft delete).

A category that still has active items cannot be removed; move or
remove those items first.
"""

from __future__ import annotations

from supply_ledger.application.show_category import active_item_count, load_active_category
from supply_ledger.domain.exceptions import ValidationError
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.logging_config import get_logger

logger = get_logger("application.remove_category")


class RemoveCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._category_repo = category_repo
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str, category_id: str) -> None:
        category = load_active_category(self._category_repo, tenant_id, category_id)
        in_use = active_item_count(self._inventory_repo, tenant_id, category_id)
        if in_use:
            raise ValidationError(
                f"Cannot delete category '{category.name}' with {in_use} active item(s)"
            )
        category.deactivate()
        self._category_repo.save(category)
        logger.info("category_removed", extra={"category_id": category_id})
