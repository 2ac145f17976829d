from __future__ import annotations

import json
from pathlib import Path

import pytest
from services.api.app.db import database
from services.api.app.db.database import (
    JsonDocumentStore,
    StoreNotInitializedError,
    StorePersistError,
    round2,
)
from services.api.app.models.order import OrderItemInput
from services.api.app.services.order_builder import build_order
from services.api.app.services.order_repository import OrderRepository


@pytest.fixture()
def store(tmp_path: Path) -> JsonDocumentStore:
    s = JsonDocumentStore(tmp_path / "db.json")
    s.initialize()
    return s


def _item(name: str, price: float, quantity: int = 1) -> OrderItemInput:
    return OrderItemInput(name=name, size="medium", price=price, quantity=quantity)


def test_get_document_requires_initialize(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path / "db.json")
    with pytest.raises(StoreNotInitializedError):
        store.get_document()
    with pytest.raises(StoreNotInitializedError):
        store.compute_stats()


def test_close_drops_document(store: JsonDocumentStore) -> None:
    store.close()
    assert not store.is_initialized
    with pytest.raises(StoreNotInitializedError):
        store.get_document()


def test_reload_reproduces_orders(store: JsonDocumentStore) -> None:
    repository = OrderRepository(store)
    repository.add_order(build_order([_item("Latte", 4.5, 2)], timestamp="2026-01-02T10:00:00.000Z"))
    repository.add_order(build_order([_item("Muffin", 2.25)], timestamp="2026-01-01T09:00:00.000Z"))
    repository.add_order(build_order([_item("Bagel", 2.8)], timestamp="2026-01-03T08:00:00.000Z"))

    reloaded = JsonDocumentStore(store.path)
    reloaded.initialize()

    original = [o.model_dump() for o in store.get_document().orders]
    assert [o.model_dump() for o in reloaded.get_document().orders] == original
    assert reloaded.get_document().metadata == store.get_document().metadata


def test_file_uses_camel_case_fields(store: JsonDocumentStore) -> None:
    OrderRepository(store).add_order(build_order([_item("Latte", 4.5, 2)]))

    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    order = on_disk["orders"][0]
    assert order["totalPrice"] == 9.0
    assert order["status"] == "pending"
    assert set(order["items"][0]) == {"id", "name", "size", "price", "quantity"}
    assert set(on_disk["metadata"]) == {"version", "createdAt", "lastUpdated"}


def test_touch_metadata_refreshes_last_updated(
    store: JsonDocumentStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(database, "utc_now_iso", lambda: "2030-01-01T00:00:00.000Z")

    store.touch_metadata()

    assert store.get_document().metadata.last_updated == "2030-01-01T00:00:00.000Z"
    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert on_disk["metadata"]["lastUpdated"] == "2030-01-01T00:00:00.000Z"


def test_persist_failure_is_raised_and_memory_stays_ahead(
    store: JsonDocumentStore, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    store.path = blocker / "db.json"

    store.get_document().orders.append(build_order([_item("Latte", 4.5)]))
    with pytest.raises(StorePersistError):
        store.persist()
    assert len(store.get_document().orders) == 1


def test_snapshot_does_not_mutate_document(store: JsonDocumentStore, tmp_path: Path) -> None:
    OrderRepository(store).add_order(build_order([_item("Latte", 4.5)]))
    before = store.get_document().model_dump()

    target = store.snapshot_to_file(tmp_path / "exports" / "snapshot.json")

    assert store.get_document().model_dump() == before
    assert json.loads(target.read_text(encoding="utf-8")) == json.loads(
        store.path.read_text(encoding="utf-8")
    )


def test_create_backup_writes_timestamped_file(store: JsonDocumentStore) -> None:
    OrderRepository(store).add_order(build_order([_item("Latte", 4.5)]))

    backup = store.create_backup()

    assert backup.parent == store.path.parent
    assert backup.name.startswith("backup-")
    assert backup.suffix == ".json"
    restored = JsonDocumentStore(backup)
    restored.initialize()
    assert restored.get_document().orders == store.get_document().orders


def test_compute_stats_empty(store: JsonDocumentStore) -> None:
    stats = store.compute_stats()
    assert stats.total_orders == 0
    assert stats.total_revenue == 0
    assert stats.avg_order_value == 0
    assert stats.last_updated == store.get_document().metadata.last_updated


def test_compute_stats_rounds_to_cents(store: JsonDocumentStore) -> None:
    repository = OrderRepository(store)
    repository.add_order(build_order([_item("Latte", 4.5, 2), _item("Muffin", 2.25)]))
    repository.add_order(build_order([_item("Americano", 3.0)]))

    stats = store.compute_stats()
    assert stats.total_orders == 2
    assert stats.total_revenue == 14.25
    assert stats.avg_order_value == 7.13


@pytest.mark.parametrize(
    ("value", "expected"),
    [(11.25, 11.25), (0.125, 0.13), (-0.125, -0.13), (10 / 3, 3.33), (0.0, 0.0)],
)
def test_round2(value: float, expected: float) -> None:
    assert round2(value) == expected
