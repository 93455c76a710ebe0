"""Tests for the JSON ledger store against a real file in tmp_path."""

import json
import multiprocessing
import threading
from datetime import datetime, timezone
from pathlib import Path

import pytest
from filelock import FileLock, Timeout

from supply_ledger.domain.exceptions import (
    LedgerIntegrityError,
    PersistenceConflictError,
    PersistenceFailureError,
)
from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.value_objects import Money, Supplier
from supply_ledger.domain.repository.filters import ItemQuery, TransactionQuery
from supply_ledger.domain.service.ledger_engine import LedgerEngine
from supply_ledger.infrastructure.persistence.json_ledger_store import JsonLedgerStore
from tests.fakes import FixedClock, sequential_ids

SCHOOL = "school-1"
START = datetime(2024, 9, 2, 8, 0, tzinfo=timezone.utc)


def _check_in_many(args):
    """Run in a separate process: check in one unit at a time, count successes."""
    ledger_path, item_id, count = args
    engine = LedgerEngine(JsonLedgerStore(Path(ledger_path)))
    committed = 0
    for _ in range(count):
        try:
            engine.apply_transaction(SCHOOL, item_id, "check-in", 1, "worker")
        except PersistenceConflictError:
            continue
        committed += 1
    return committed


@pytest.fixture
def ledger_file(tmp_path):
    return tmp_path / "ledger.json"


@pytest.fixture
def store(ledger_file):
    return JsonLedgerStore(ledger_file)


@pytest.fixture
def engine(store):
    return LedgerEngine(store, clock=FixedClock(START), id_factory=sequential_ids())


class TestJsonLedgerStore:

    def test_creates_empty_ledger(self, store, ledger_file):
        assert json.loads(ledger_file.read_text()) == {"items": [], "transactions": []}

    def test_item_and_opening_written_together(self, engine, ledger_file):
        item, opening = engine.create_item(
            SCHOOL, "teacher-1", category_id="art", name="Crayons", quantity=12, cost="1.25",
            supplier=Supplier(name="Depot"),
        )
        raw = json.loads(ledger_file.read_text())
        assert raw["items"][0]["quantity"] == 12
        assert raw["items"][0]["cost"] == "1.25"
        assert raw["items"][0]["version"] == 1
        assert raw["transactions"][0]["id"] == opening.id
        assert raw["transactions"][0]["reason"] == "Initial stock"

    def test_reload_from_disk(self, engine, ledger_file):
        item, _ = engine.create_item(
            SCHOOL, "teacher-1", category_id="art", name="Crayons", quantity=12, cost="1.25",
            supplier=Supplier(name="Depot", email="x@depot.example"),
        )
        engine.apply_transaction(SCHOOL, item.id, "check-out", 5, "teacher-2", reason="Art")

        reopened = JsonLedgerStore(ledger_file)
        loaded = reopened.get_by_id(SCHOOL, item.id)
        assert loaded.quantity == 7
        assert loaded.cost == Money.of("1.25")
        assert loaded.supplier.email == "x@depot.example"
        assert loaded.created_at == START
        assert loaded.version == 2

        history = reopened.list_transactions(TransactionQuery(tenant_id=SCHOOL, item_id=item.id))
        assert [t.quantity for t in history] == [-5, 12]
        assert history[0].user_id == "teacher-2"

    def test_tenant_isolation(self, engine, store):
        item, _ = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons")
        assert store.get_by_id("school-2", item.id) is None
        assert store.list_matching(ItemQuery(tenant_id="school-2")) == []

    def test_listing_sorted_by_name(self, engine, store):
        for name in ("paper", "Crayons", "glue"):
            engine.create_item(SCHOOL, "t", category_id="art", name=name)
        names = [i.name for i in store.list_matching(ItemQuery(tenant_id=SCHOOL))]
        assert names == ["Crayons", "glue", "paper"]

    def test_stale_version_rejected(self, engine, store, ledger_file):
        item, _ = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons", quantity=5)
        stale = store.get_by_id(SCHOOL, item.id)
        engine.apply_transaction(SCHOOL, item.id, "check-in", 1, "t")

        before = ledger_file.read_text()
        stale.name = "Renamed"
        with pytest.raises(PersistenceConflictError) as exc:
            store.save_details(stale, stale.version)
        assert exc.value.actual_version == 2
        assert ledger_file.read_text() == before

    def test_quantity_drift_refused(self, engine, store):
        item, _ = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons", quantity=5)
        loaded = store.get_by_id(SCHOOL, item.id)
        loaded.quantity = 50
        with pytest.raises(LedgerIntegrityError):
            store.save_details(loaded, loaded.version)
        assert store.get_by_id(SCHOOL, item.id).quantity == 5

    def test_write_failure_keeps_previous_ledger(self, engine, store, ledger_file, monkeypatch):
        item, _ = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons", quantity=5)
        before = ledger_file.read_text()

        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(
            "supply_ledger.infrastructure.persistence.json_file.os.replace",
            broken_replace,
        )
        with pytest.raises(PersistenceFailureError, match="Cannot write ledger"):
            engine.apply_transaction(SCHOOL, item.id, "check-out", 2, "t")

        assert ledger_file.read_text() == before
        assert list(ledger_file.parent.glob("*.tmp")) == []

    def test_corrupt_file_reported(self, ledger_file):
        ledger_file.write_text("{not json")
        store = JsonLedgerStore(ledger_file)
        with pytest.raises(PersistenceFailureError, match="Cannot read ledger"):
            store.get_by_id(SCHOOL, "x")

    def test_get_transaction(self, engine, store):
        item, opening = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons", quantity=5)
        assert store.get_transaction(SCHOOL, opening.id) == opening
        assert store.get_transaction("school-2", opening.id) is None

    def test_inactive_items_listed_only_on_request(self, engine, store):
        item, _ = engine.create_item(SCHOOL, "t", category_id="art", name="Crayons")
        engine.deactivate_item(SCHOOL, item.id)
        assert store.list_matching(ItemQuery(tenant_id=SCHOOL)) == []
        assert len(store.list_matching(ItemQuery(tenant_id=SCHOOL, include_inactive=True))) == 1

    def test_writer_holds_lock_file(self, store, ledger_file):
        lock_path = ledger_file.with_name("ledger.json.lock")
        with store._file.locked():
            with pytest.raises(Timeout):
                FileLock(str(lock_path), timeout=0.05).acquire()


class TestSharedLedgerFile:
    """Several stores (threads or processes) writing the same ledger file."""

    def test_separate_stores_do_not_lose_other_items(self, ledger_file):
        setup = LedgerEngine(JsonLedgerStore(ledger_file))
        items = [
            setup.create_item(SCHOOL, "t", category_id="art", name=f"Item {n}")[0]
            for n in range(4)
        ]

        def check_in(item_id):
            engine = LedgerEngine(JsonLedgerStore(ledger_file))
            for _ in range(10):
                engine.apply_transaction(SCHOOL, item_id, "check-in", 1, "t")

        threads = [threading.Thread(target=check_in, args=(item.id,)) for item in items]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        store = JsonLedgerStore(ledger_file)
        for item in items:
            assert store.get_by_id(SCHOOL, item.id).quantity == 10
        assert len(store.list_transactions(TransactionQuery(tenant_id=SCHOOL))) == 40

    @pytest.mark.parametrize("same_item", [False, True], ids=["distinct-items", "same-item"])
    def test_concurrent_processes(self, ledger_file, same_item):
        setup = LedgerEngine(JsonLedgerStore(ledger_file))
        first, _ = setup.create_item(SCHOOL, "t", category_id="art", name="Crayons")
        second, _ = setup.create_item(SCHOOL, "t", category_id="art", name="Glue")
        targets = [first.id, first.id] if same_item else [first.id, second.id]

        ctx = multiprocessing.get_context("spawn")
        with ctx.Pool(len(targets)) as pool:
            committed = pool.map(
                _check_in_many, [(str(ledger_file), item_id, 15) for item_id in targets]
            )

        store = JsonLedgerStore(ledger_file)
        stock = {
            item_id: store.get_by_id(SCHOOL, item_id).quantity for item_id in set(targets)
        }
        if same_item:
            assert stock[first.id] == sum(committed)
        else:
            assert committed == [15, 15]
            assert stock == {first.id: 15, second.id: 15}
        history = store.list_transactions(TransactionQuery(tenant_id=SCHOOL))
        assert len(history) == sum(committed)
        for item_id in set(targets):
            quantities = [
                t.new_quantity for t in reversed(history) if t.item_id == item_id
            ]
            assert quantities == list(range(1, stock[item_id] + 1))
