from __future__ import annotations

import logging
import math
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from packages.shared.schemas.order_v1 import OrderStatsV1
from pydantic import ValidationError
from services.api.app.db.models import DatabaseDocument, DatabaseMetadata, utc_now_iso

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for database store errors."""


class StoreNotInitializedError(StoreError):
    def __init__(self) -> None:
        super().__init__("Database not initialized. Call initialize() first.")


class StoreInitializationError(StoreError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Database initialization failed for {path}: {reason}")
        self.path = path


class StorePersistError(StoreError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write database file {path}: {reason}")
        self.path = path


def _default_db_path() -> Path:
    # Local-only default. Deployments should set POS_DB_PATH explicitly.
    return Path("data") / "db.json"


def round2(value: float) -> float:
    """Round to cents, halves away from zero."""

    return math.copysign(math.floor(abs(value) * 100 + 0.5) / 100, value)


class JsonDocumentStore:
    """Owns the single JSON document holding every order plus metadata.

    The document is loaded once by ``initialize()`` and every mutation rewrites the
    whole file. Callers doing read-modify-write must hold ``locked()`` until the
    write has been persisted.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._document: DatabaseDocument | None = None
        self._lock = threading.RLock()

    @classmethod
    def from_env(cls) -> JsonDocumentStore:
        raw = os.getenv("POS_DB_PATH", "").strip()
        return cls(Path(raw) if raw else _default_db_path())

    @property
    def is_initialized(self) -> bool:
        return self._document is not None

    def initialize(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        except (OSError, UnicodeDecodeError) as e:
            raise StoreInitializationError(self.path, str(e)) from e

        if not text.strip():
            now = utc_now_iso()
            self._document = DatabaseDocument(
                metadata=DatabaseMetadata(created_at=now, last_updated=now)
            )
            try:
                self.persist()
            except StorePersistError as e:
                self._document = None
                raise StoreInitializationError(self.path, str(e)) from e
            logger.info("database initialized with default data: %s", self.path)
            return

        try:
            self._document = DatabaseDocument.model_validate_json(text)
        except ValidationError as e:
            raise StoreInitializationError(self.path, "unreadable database document") from e

        logger.info(
            "database loaded: path=%s orders=%d", self.path, len(self._document.orders)
        )

    def close(self) -> None:
        with self._lock:
            self._document = None

    def get_document(self) -> DatabaseDocument:
        if self._document is None:
            raise StoreNotInitializedError()
        return self._document

    @contextmanager
    def locked(self) -> Iterator[DatabaseDocument]:
        with self._lock:
            yield self.get_document()

    def persist(self) -> None:
        self._write(self.path, self.get_document())

    def touch_metadata(self) -> None:
        with self._lock:
            document = self.get_document()
            document.metadata.last_updated = utc_now_iso()
            self.persist()

    def snapshot_to_file(self, path: Path) -> Path:
        path = Path(path)
        with self._lock:
            document = self.get_document()
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorePersistError(path, str(e)) from e
            self._write(path, document)
        return path

    def create_backup(self) -> Path:
        backup_path = self.path.parent / f"backup-{int(time.time() * 1000)}.json"
        self.snapshot_to_file(backup_path)
        logger.info("backup created: %s", backup_path)
        return backup_path

    def compute_stats(self) -> OrderStatsV1:
        document = self.get_document()
        total_orders = len(document.orders)
        total_revenue = sum(order.total_price for order in document.orders)
        avg_order_value = total_revenue / total_orders if total_orders else 0.0

        return OrderStatsV1(
            total_orders=total_orders,
            total_revenue=round2(total_revenue),
            avg_order_value=round2(avg_order_value),
            last_updated=document.metadata.last_updated,
        )

    @staticmethod
    def _write(path: Path, document: DatabaseDocument) -> None:
        payload = document.model_dump_json(by_alias=True, indent=2)
        try:
            path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            raise StorePersistError(path, str(e)) from e
