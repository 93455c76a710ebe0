"""Application service: Add Category use case."""

from __future__ import annotations

from typing import Callable
from uuid import uuid4

from supply_ledger.domain.exceptions import ValidationError
from supply_ledger.domain.model.category import Category
from supply_ledger.domain.repository.category_repository import CategoryRepository


class AddCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._category_repo = category_repo
        self._new_id = id_factory or (lambda: uuid4().hex)

    def handle(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Category:
        """Add a category; names are unique within a school."""
        if name and self._category_repo.get_by_name(tenant_id, name) is not None:
            raise ValidationError(f"Category '{name.strip()}' already exists")

        category = Category.create(
            id=self._new_id(),
            tenant_id=tenant_id,
            name=name,
            description=description,
            color=color,
        )
        self._category_repo.save(category)
        return category
