"""Integration tests for the item and category use cases.

Uses in-memory fake repositories — no file I/O.
"""

import pytest

from supply_ledger.application.add_category import AddCategoryHandler
from supply_ledger.application.create_item import CreateItemHandler
from supply_ledger.application.dto import NewItemSpec
from supply_ledger.application.list_categories import ListCategoriesHandler
from supply_ledger.application.remove_category import RemoveCategoryHandler
from supply_ledger.application.remove_item import RemoveItemHandler
from supply_ledger.application.show_category import ShowCategoryHandler
from supply_ledger.application.update_category import UpdateCategoryHandler
from supply_ledger.application.show_inventory import ShowInventoryHandler, ShowItemHandler
from supply_ledger.application.update_item import UpdateItemHandler
from supply_ledger.domain.exceptions import (
    EntityNotFoundError,
    ItemNotFoundError,
    ValidationError,
)
from supply_ledger.domain.model.category import Category
from supply_ledger.domain.service.ledger_engine import LedgerEngine
from tests.fakes import FakeCategoryRepository, FakeInventoryStore, sequential_ids

SCHOOL = "school-1"
TEACHER = "teacher-1"


def _setup():
    store = FakeInventoryStore()
    categories = FakeCategoryRepository([
        Category(id="art", tenant_id=SCHOOL, name="Art"),
        Category(id="old", tenant_id=SCHOOL, name="Old", is_active=False),
        Category(id="other", tenant_id="school-2", name="Other"),
    ])
    engine = LedgerEngine(store, id_factory=sequential_ids("item"))
    return engine, store, categories


class TestCreateItem:

    def test_creates_item_with_opening_stock(self):
        engine, store, categories = _setup()
        dto = CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art", quantity=10, cost="2.00")
        )
        assert dto.quantity == 10
        assert dto.unit_cost == "$2.00"
        assert dto.total_value == "$20.00"
        assert dto.stock_status == "in-stock"

        detail = ShowItemHandler(store, store).handle(SCHOOL, dto.id)
        assert [(t.type, t.reason) for t in detail.history] == [("check-in", "Initial stock")]

    def test_supplier_details_kept(self):
        engine, store, categories = _setup()
        dto = CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER,
            NewItemSpec(name="Paper", category_id="art", supplier_name="Depot", supplier_email="a@depot.example"),
        )
        assert store.get_by_id(SCHOOL, dto.id).supplier.email == "a@depot.example"

    @pytest.mark.parametrize("category_id", ["missing", "old", "other"])
    def test_unusable_category_rejected(self, category_id):
        engine, _, categories = _setup()
        with pytest.raises(EntityNotFoundError, match="Category"):
            CreateItemHandler(engine, categories).handle(
                SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id=category_id)
            )

    def test_invalid_cost_rejected(self):
        engine, _, categories = _setup()
        with pytest.raises(ValidationError, match="Invalid cost"):
            CreateItemHandler(engine, categories).handle(
                SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art", cost="abc")
            )


class TestUpdateAndRemoveItem:

    def _create(self, engine, categories, quantity=10):
        return CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art", quantity=quantity)
        )

    def test_quantity_edit_is_logged(self):
        engine, store, categories = _setup()
        item = self._create(engine, categories)
        dto = UpdateItemHandler(engine, categories).handle(SCHOOL, item.id, TEACHER, {"quantity": 3})
        assert dto.quantity == 3
        assert dto.stock_status == "low-stock"

        history = ShowItemHandler(store, store).handle(SCHOOL, item.id).history
        assert [(t.type, t.quantity, t.reason) for t in history] == [
            ("adjustment", -7, "Manual adjustment"),
            ("check-in", 10, "Initial stock"),
        ]

    def test_empty_update_rejected(self):
        engine, _, categories = _setup()
        item = self._create(engine, categories)
        with pytest.raises(ValidationError, match="Nothing to update"):
            UpdateItemHandler(engine, categories).handle(SCHOOL, item.id, TEACHER, {})

    def test_move_to_inactive_category_rejected(self):
        engine, _, categories = _setup()
        item = self._create(engine, categories)
        with pytest.raises(EntityNotFoundError):
            UpdateItemHandler(engine, categories).handle(SCHOOL, item.id, TEACHER, {"category_id": "old"})

    def test_supplier_replaced(self):
        engine, store, categories = _setup()
        item = self._create(engine, categories)
        dto = UpdateItemHandler(engine, categories).handle(
            SCHOOL, item.id, TEACHER,
            {"supplier": {"name": "School Depot", "contact": None, "email": "orders@depot.example"}},
        )
        assert dto.supplier == "School Depot"
        stored = store.get_by_id(SCHOOL, item.id)
        assert stored.supplier.email == "orders@depot.example"
        assert stored.quantity == 10

    def test_invalid_supplier_leaves_item_unchanged(self):
        engine, store, categories = _setup()
        item = self._create(engine, categories)
        with pytest.raises(ValidationError, match="Supplier name is required"):
            UpdateItemHandler(engine, categories).handle(
                SCHOOL, item.id, TEACHER, {"supplier": {"name": "  "}}
            )
        assert store.get_by_id(SCHOOL, item.id).supplier is None

    def test_removed_item_hidden_from_listing(self):
        engine, store, categories = _setup()
        item = self._create(engine, categories)
        RemoveItemHandler(engine).handle(SCHOOL, item.id)
        assert ShowInventoryHandler(store).handle(SCHOOL) == []
        with pytest.raises(ItemNotFoundError):
            RemoveItemHandler(engine).handle(SCHOOL, item.id)


class TestShowInventory:

    def test_filters_by_status_and_search(self):
        engine, store, categories = _setup()
        create = CreateItemHandler(engine, categories)
        create.handle(SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art", quantity=0))
        create.handle(SCHOOL, TEACHER, NewItemSpec(name="Glue sticks", category_id="art", quantity=3))
        create.handle(SCHOOL, TEACHER, NewItemSpec(name="Paper", category_id="art", quantity=50,
                                                   description="Colored construction paper"))

        show = ShowInventoryHandler(store)
        assert [i.name for i in show.handle(SCHOOL)] == ["Crayons", "Glue sticks", "Paper"]
        assert [i.name for i in show.handle(SCHOOL, status="low-stock")] == ["Crayons", "Glue sticks"]
        assert [i.name for i in show.handle(SCHOOL, status="out-of-stock")] == ["Crayons"]
        assert [i.name for i in show.handle(SCHOOL, search="COLORED")] == ["Paper"]
        assert show.handle("school-2") == []

    def test_unknown_status_rejected(self):
        _, store, _ = _setup()
        with pytest.raises(ValidationError):
            ShowInventoryHandler(store).handle(SCHOOL, status="plenty")

    def test_show_missing_item(self):
        _, store, _ = _setup()
        with pytest.raises(ItemNotFoundError):
            ShowItemHandler(store, store).handle(SCHOOL, "nope")


class TestCategories:

    def test_add_and_list_with_counts(self):
        engine, store, categories = _setup()
        science = AddCategoryHandler(categories, id_factory=lambda: "science").handle(
            SCHOOL, "Science", color="#4CAF50"
        )
        CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER, NewItemSpec(name="Beakers", category_id=science.id)
        )

        listed = ListCategoriesHandler(categories, store).handle(SCHOOL)
        assert [(c.name, c.item_count) for c in listed] == [("Art", 0), ("Science", 1)]

    def test_duplicate_name_rejected(self):
        _, _, categories = _setup()
        with pytest.raises(ValidationError, match="already exists"):
            AddCategoryHandler(categories).handle(SCHOOL, " art ")

    def test_same_name_in_another_school_allowed(self):
        _, _, categories = _setup()
        category = AddCategoryHandler(categories).handle("school-2", "Art")
        assert category.tenant_id == "school-2"

    def test_bad_color_rejected(self):
        _, _, categories = _setup()
        with pytest.raises(ValidationError, match="hex color"):
            AddCategoryHandler(categories).handle(SCHOOL, "Music", color="blue")

    def test_show_counts_active_items_only(self):
        engine, store, categories = _setup()
        create = CreateItemHandler(engine, categories)
        create.handle(SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art"))
        glue = create.handle(SCHOOL, TEACHER, NewItemSpec(name="Glue", category_id="art"))
        RemoveItemHandler(engine).handle(SCHOOL, glue.id)

        dto = ShowCategoryHandler(categories, store).handle(SCHOOL, "art")
        assert dto.name == "Art"
        assert dto.item_count == 1

    @pytest.mark.parametrize("category_id", ["missing", "old", "other"])
    def test_show_unusable_category(self, category_id):
        _, store, categories = _setup()
        with pytest.raises(EntityNotFoundError, match="Category"):
            ShowCategoryHandler(categories, store).handle(SCHOOL, category_id)

    def test_update_category(self):
        _, store, categories = _setup()
        dto = UpdateCategoryHandler(categories, store).handle(
            SCHOOL, "art", {"name": " Art & Craft ", "color": "#FF9800", "description": "Paint"}
        )
        assert (dto.name, dto.color, dto.description) == ("Art & Craft", "#FF9800", "Paint")
        assert categories.get_by_id(SCHOOL, "art").name == "Art & Craft"

    def test_update_keeps_own_name(self):
        _, store, categories = _setup()
        dto = UpdateCategoryHandler(categories, store).handle(SCHOOL, "art", {"name": "ART"})
        assert dto.name == "ART"

    def test_rename_onto_existing_name_rejected(self):
        _, store, categories = _setup()
        AddCategoryHandler(categories, id_factory=lambda: "music").handle(SCHOOL, "Music")
        with pytest.raises(ValidationError, match="already exists"):
            UpdateCategoryHandler(categories, store).handle(SCHOOL, "art", {"name": "music"})
        assert categories.get_by_id(SCHOOL, "art").name == "Art"

    def test_bad_color_leaves_category_unchanged(self):
        _, store, categories = _setup()
        with pytest.raises(ValidationError, match="hex color"):
            UpdateCategoryHandler(categories, store).handle(
                SCHOOL, "art", {"name": "Crafts", "color": "orange"}
            )
        assert categories.get_by_id(SCHOOL, "art").name == "Art"

    def test_update_other_schools_category_rejected(self):
        _, store, categories = _setup()
        with pytest.raises(EntityNotFoundError):
            UpdateCategoryHandler(categories, store).handle(SCHOOL, "other", {"name": "Mine"})

    def test_remove_blocked_while_items_remain(self):
        engine, store, categories = _setup()
        CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art")
        )
        with pytest.raises(ValidationError, match="with 1 active item"):
            RemoveCategoryHandler(categories, store).handle(SCHOOL, "art")
        assert categories.get_by_id(SCHOOL, "art").is_active

    def test_remove_after_items_removed(self):
        engine, store, categories = _setup()
        item = CreateItemHandler(engine, categories).handle(
            SCHOOL, TEACHER, NewItemSpec(name="Crayons", category_id="art")
        )
        RemoveItemHandler(engine).handle(SCHOOL, item.id)

        RemoveCategoryHandler(categories, store).handle(SCHOOL, "art")
        assert ListCategoriesHandler(categories, store).handle(SCHOOL) == []
        with pytest.raises(EntityNotFoundError):
            RemoveCategoryHandler(categories, store).handle(SCHOOL, "art")
