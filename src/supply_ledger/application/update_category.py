"""Application service: Update Category use case."""

from __future__ import annotations

from supply_ledger.application.dto import CategoryDTO, category_to_dto
from supply_ledger.application.show_category import active_item_count, load_active_category
from supply_ledger.domain.exceptions import ValidationError
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.logging_config import get_logger

logger = get_logger("application.update_category")


class UpdateCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._category_repo = category_repo
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str, category_id: str, changes: dict) -> CategoryDTO:
        """Edit name, description, or color; names stay unique within a school."""
        if not changes:
            raise ValidationError("Nothing to update")

        category = load_active_category(self._category_repo, tenant_id, category_id)
        name = changes.get("name")
        if name:
            clash = self._category_repo.get_by_name(tenant_id, name)
            if clash is not None and clash.id != category.id:
                raise ValidationError(f"Category '{name.strip()}' already exists")

        category.update_details(changes)
        self._category_repo.save(category)
        logger.info(
            "category_updated",
            extra={"category_id": category.id, "fields": sorted(changes)},
        )
        return category_to_dto(
            category, active_item_count(self._inventory_repo, tenant_id, category.id)
        )
