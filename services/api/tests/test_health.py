from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from services.api.app.db.database import JsonDocumentStore
from services.api.app.main import create_app


def test_health_reports_store_stats(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_BACKUP_ON_SHUTDOWN", "false")
    app = create_app(JsonDocumentStore(tmp_path / "db.json"))

    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime"] >= 0
    assert data["database"]["connected"] is True
    assert data["database"]["stats"]["totalOrders"] == 0


def test_health_unhealthy_without_initialized_store(tmp_path: Path) -> None:
    # No context manager: startup never runs, so the store is never loaded.
    client = TestClient(create_app(JsonDocumentStore(tmp_path / "db.json")))

    response = client.get("/health")

    assert response.status_code == 500
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == {"connected": False, "error": "Database connection failed"}


def test_shutdown_writes_backup(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_BACKUP_ON_SHUTDOWN", "true")
    store = JsonDocumentStore(tmp_path / "db.json")

    with TestClient(create_app(store)) as client:
        created = client.post(
            "/api/orders",
            json={"items": [{"name": "Latte", "size": "small", "price": 3.5, "quantity": 1}]},
        )
        assert created.status_code == 201

    backups = list(tmp_path.glob("backup-*.json"))
    assert len(backups) == 1
    assert created.json()["orderId"] in backups[0].read_text(encoding="utf-8")
    assert not store.is_initialized


def test_shutdown_backup_failure_does_not_block(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("POS_BACKUP_ON_SHUTDOWN", "true")
    store = JsonDocumentStore(tmp_path / "db.json")

    with TestClient(create_app(store)):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store.path = blocker / "db.json"

    assert not store.is_initialized
