"""Abstract repository for the Category aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supply_ledger.domain.model.category import Category


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, tenant_id: str, category_id: str) -> Category | None:
        """Return a school's category by ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, tenant_id: str, name: str) -> Category | None:
        """Return a school's category by name (case-insensitive), or None."""

    @abstractmethod
    def list_active(self, tenant_id: str) -> list[Category]:
        """Return the school's active categories, sorted by name."""

    @abstractmethod
    def save(self, category: Category) -> None:
        """Persist a new or updated category."""
