"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from pathlib import Path

from supply_ledger.domain.model.category import DEFAULT_COLOR, Category
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.infrastructure.persistence.json_file import JsonFile


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, "categories", empty=list)

    # --- CategoryRepository interface -----------------------------------------

    def get_by_id(self, tenant_id: str, category_id: str) -> Category | None:
        category = self._load().get(category_id)
        if category is None or category.tenant_id != tenant_id:
            return None
        return category

    def get_by_name(self, tenant_id: str, name: str) -> Category | None:
        for category in self._load().values():
            if category.tenant_id == tenant_id and category.name.lower() == name.strip().lower():
                return category
        return None

    def list_active(self, tenant_id: str) -> list[Category]:
        return sorted(
            (
                c for c in self._load().values()
                if c.tenant_id == tenant_id and c.is_active
            ),
            key=lambda c: c.name.lower(),
        )

    def save(self, category: Category) -> None:
        with self._file.locked():
            categories = self._load()
            categories[category.id] = category
            self._persist(categories)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Category]:
        return {
            item["id"]: Category(
                id=item["id"],
                tenant_id=item["tenant_id"],
                name=item["name"],
                description=item.get("description"),
                color=item.get("color", DEFAULT_COLOR),
                is_active=item.get("is_active", True),
            )
            for item in self._file.read()
        }

    def _persist(self, categories: dict[str, Category]) -> None:
        self._file.write([
            {
                "id": c.id,
                "tenant_id": c.tenant_id,
                "name": c.name,
                "description": c.description,
                "color": c.color,
                "is_active": c.is_active,
            }
            for c in categories.values()
        ])
