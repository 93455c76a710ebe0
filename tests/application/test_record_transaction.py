"""Integration tests for the RecordTransaction and ShowTransactions use cases.

Uses in-memory fake repositories — no file I/O.
"""

from datetime import datetime, timezone

import pytest

from supply_ledger.application.record_transaction import RecordTransactionHandler
from supply_ledger.application.show_transactions import (
    ShowTransactionHandler,
    ShowTransactionsHandler,
)
from supply_ledger.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ItemNotFoundError,
)
from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.value_objects import Money
from supply_ledger.domain.service.ledger_engine import LedgerEngine
from tests.fakes import FakeInventoryStore, FixedClock, sequential_ids

SCHOOL = "school-1"
START = datetime(2024, 9, 2, 8, 0, tzinfo=timezone.utc)


def _setup() -> tuple[RecordTransactionHandler, ShowTransactionsHandler, FakeInventoryStore]:
    store = FakeInventoryStore([
        InventoryItem(
            id="pencils", tenant_id=SCHOOL, category_id="writing",
            name="Pencils", quantity=4, cost=Money.of("0.25"),
        ),
        InventoryItem(
            id="markers", tenant_id=SCHOOL, category_id="writing",
            name="Markers", quantity=20, cost=Money.of("1.00"),
        ),
    ])
    engine = LedgerEngine(store, clock=FixedClock(START), id_factory=sequential_ids())
    return (
        RecordTransactionHandler(engine, store),
        ShowTransactionsHandler(store, store),
        store,
    )


class TestRecordTransaction:

    def test_returns_dto_with_item_name(self):
        record, _, _ = _setup()
        dto = record.handle(SCHOOL, "pencils", "check-out", 3, "teacher-1", reason="Art class")
        assert dto.item_name == "Pencils"
        assert dto.type == "check-out"
        assert dto.quantity == -3
        assert dto.previous_quantity == 4
        assert dto.new_quantity == 1
        assert dto.total_value == "$0.75"
        assert dto.created_at == "2024-09-02 08:00 UTC"

    def test_supplier_attached_to_check_in(self):
        record, _, store = _setup()
        dto = record.handle(
            SCHOOL, "pencils", "check-in", 50, "office-1",
            supplier_name="School Depot", supplier_contact="555-0101",
        )
        txn = store.get_transaction(SCHOOL, dto.id)
        assert txn.supplier.name == "School Depot"

    def test_insufficient_stock_propagates(self):
        record, _, store = _setup()
        with pytest.raises(InsufficientStockError):
            record.handle(SCHOOL, "pencils", "check-out", 6, "teacher-1")
        assert store.get_by_id(SCHOOL, "pencils").quantity == 4

    def test_other_school_cannot_see_item(self):
        record, _, _ = _setup()
        with pytest.raises(ItemNotFoundError):
            record.handle("school-2", "pencils", "check-in", 1, "teacher-9")


class TestShowTransactions:

    def test_newest_first(self):
        record, show, _ = _setup()
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")
        record.handle(SCHOOL, "markers", "check-out", 2, "teacher-2")
        record.handle(SCHOOL, "pencils", "check-out", 1, "teacher-1")

        rows = show.handle(SCHOOL)
        assert [(r.item_name, r.type) for r in rows] == [
            ("Pencils", "check-out"),
            ("Markers", "check-out"),
            ("Pencils", "check-in"),
        ]

    def test_filters(self):
        record, show, _ = _setup()
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")
        record.handle(SCHOOL, "markers", "check-out", 2, "teacher-2")
        record.handle(SCHOOL, "pencils", "check-out", 1, "teacher-1")

        assert len(show.handle(SCHOOL, item_id="pencils")) == 2
        assert len(show.handle(SCHOOL, transaction_type="check-out")) == 2
        assert len(show.handle(SCHOOL, user_id="teacher-2")) == 1
        assert len(show.handle(SCHOOL, limit=1)) == 1
        assert show.handle("school-2") == []

    def test_date_bounds_are_inclusive(self):
        record, show, _ = _setup()
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")   # 08:00:00
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")   # 08:00:01
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")   # 08:00:02

        second = START.replace(second=1)
        assert len(show.handle(SCHOOL, start=second)) == 2
        assert len(show.handle(SCHOOL, end=second)) == 2
        assert len(show.handle(SCHOOL, start=second, end=second)) == 1

    def test_naive_bounds_read_as_utc(self):
        record, show, _ = _setup()
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")   # 08:00:00
        record.handle(SCHOOL, "pencils", "check-in", 10, "teacher-1")   # 08:00:01

        naive_second = datetime(2024, 9, 2, 8, 0, 1)
        assert len(show.handle(SCHOOL, start=naive_second)) == 1
        assert len(show.handle(SCHOOL, end=naive_second)) == 2
        assert show.handle(SCHOOL, end=datetime(2024, 9, 1)) == []

    def test_removed_items_keep_their_name(self):
        store = FakeInventoryStore([
            InventoryItem(id="glue", tenant_id=SCHOOL, category_id="art", name="Glue", quantity=3),
        ])
        engine = LedgerEngine(store, clock=FixedClock(START))
        RecordTransactionHandler(engine, store).handle(SCHOOL, "glue", "check-out", 1, "t")
        engine.deactivate_item(SCHOOL, "glue")

        rows = ShowTransactionsHandler(store, store).handle(SCHOOL)
        assert rows[0].item_name == "Glue"


class TestShowTransaction:

    def test_single_transaction_with_details(self):
        record, _, store = _setup()
        recorded = record.handle(
            SCHOOL, "pencils", "check-in", 50, "office-1",
            supplier_name="School Depot", reference="PO-1042",
        )
        dto = ShowTransactionHandler(store, store).handle(SCHOOL, recorded.id)
        assert dto == recorded
        assert dto.item_name == "Pencils"
        assert dto.reference == "PO-1042"
        assert dto.supplier == "School Depot"

    def test_unknown_or_foreign_transaction(self):
        record, _, store = _setup()
        recorded = record.handle(SCHOOL, "pencils", "check-in", 1, "teacher-1")
        show = ShowTransactionHandler(store, store)
        with pytest.raises(EntityNotFoundError, match="Transaction 'nope' not found"):
            show.handle(SCHOOL, "nope")
        with pytest.raises(EntityNotFoundError):
            show.handle("school-2", recorded.id)
