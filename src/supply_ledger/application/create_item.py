"""Application service: Create Item use case.

Opening stock is not written straight onto the item: the ledger engine
records it as an "Initial stock" check-in so the item's history starts
complete.
"""

from __future__ import annotations

from supply_ledger.application.dto import ItemDTO, NewItemSpec, item_to_dto
from supply_ledger.domain.exceptions import EntityNotFoundError
from supply_ledger.domain.model.value_objects import Supplier
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.service.ledger_engine import LedgerEngine


class CreateItemHandler:

    def __init__(self, engine: LedgerEngine, category_repo: CategoryRepository) -> None:
        self._engine = engine
        self._category_repo = category_repo

    def handle(self, tenant_id: str, actor_id: str, new_item: NewItemSpec) -> ItemDTO:
        category = self._category_repo.get_by_id(tenant_id, new_item.category_id)
        if category is None or not category.is_active:
            raise EntityNotFoundError(f"Category '{new_item.category_id}' not found")

        supplier = None
        if new_item.supplier_name:
            supplier = Supplier(
                name=new_item.supplier_name,
                contact=new_item.supplier_contact,
                email=new_item.supplier_email,
            )

        item, _ = self._engine.create_item(
            tenant_id,
            actor_id,
            category_id=category.id,
            name=new_item.name,
            quantity=new_item.quantity,
            unit=new_item.unit,
            min_threshold=new_item.min_threshold,
            max_threshold=new_item.max_threshold,
            cost=new_item.cost,
            description=new_item.description,
            supplier=supplier,
            location=new_item.location,
            barcode=new_item.barcode,
        )
        return item_to_dto(item)
