"""Application service: Update Item use case.

Accepts any mix of field edits. If ``quantity`` is among them the ledger
engine records the difference as a "Manual adjustment"; the quantity is
never overwritten silently.
"""

from __future__ import annotations

from supply_ledger.application.dto import ItemDTO, item_to_dto
from supply_ledger.domain.exceptions import EntityNotFoundError, ValidationError
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.service.ledger_engine import LedgerEngine


class UpdateItemHandler:

    def __init__(self, engine: LedgerEngine, category_repo: CategoryRepository) -> None:
        self._engine = engine
        self._category_repo = category_repo

    def handle(
        self,
        tenant_id: str,
        item_id: str,
        actor_id: str,
        changes: dict,
    ) -> ItemDTO:
        if not changes:
            raise ValidationError("Nothing to update")

        category_id = changes.get("category_id")
        if category_id is not None:
            category = self._category_repo.get_by_id(tenant_id, category_id)
            if category is None or not category.is_active:
                raise EntityNotFoundError(f"Category '{category_id}' not found")

        item, _ = self._engine.update_item(tenant_id, item_id, actor_id, changes)
        return item_to_dto(item)
