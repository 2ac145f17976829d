from __future__ import annotations

import logging
from datetime import datetime

from packages.shared.schemas.order_v1 import OrderStatsV1, OrderStatusV1, OrderV1
from services.api.app.db.database import JsonDocumentStore, StoreError
from services.api.app.db.models import as_utc, parse_timestamp

logger = logging.getLogger(__name__)


class OrderRepositoryError(Exception):
    """Raised when the underlying store fails during an order operation."""


def sort_newest_first(orders: list[OrderV1]) -> list[OrderV1]:
    return sorted(orders, key=lambda order: parse_timestamp(order.timestamp), reverse=True)


class OrderRepository:
    """CRUD and query operations over the store's order collection.

    Mutations run inside the store's lock and end with ``touch_metadata()``, which
    rewrites the database file.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def add_order(self, order: OrderV1) -> None:
        try:
            with self._store.locked() as document:
                document.orders.insert(0, order)
                self._store.touch_metadata()
        except StoreError as e:
            raise OrderRepositoryError("Failed to save order to database") from e

        logger.info("order saved: %s", order.id)

    def get_all_orders(self) -> list[OrderV1]:
        try:
            document = self._store.get_document()
        except StoreError as e:
            raise OrderRepositoryError("Failed to fetch orders from database") from e
        return sort_newest_first(document.orders)

    def get_order_by_id(self, order_id: str) -> OrderV1 | None:
        try:
            document = self._store.get_document()
        except StoreError as e:
            raise OrderRepositoryError("Failed to fetch order from database") from e

        for order in document.orders:
            if order.id == order_id:
                return order
        return None

    def count_orders(self) -> int:
        try:
            return len(self._store.get_document().orders)
        except StoreError as e:
            raise OrderRepositoryError("Failed to count orders") from e

    def get_orders_by_date_range(self, start: datetime, end: datetime) -> list[OrderV1]:
        """Orders whose timestamp falls within ``[start, end]``, in stored order.

        Naive bounds are taken to be UTC.
        """

        try:
            document = self._store.get_document()
        except StoreError as e:
            raise OrderRepositoryError("Failed to fetch orders by date range") from e

        start, end = as_utc(start), as_utc(end)
        return [
            order for order in document.orders if start <= parse_timestamp(order.timestamp) <= end
        ]

    def update_order_status(self, order_id: str, status: OrderStatusV1) -> bool:
        try:
            with self._store.locked() as document:
                order = next((o for o in document.orders if o.id == order_id), None)
                if order is None:
                    return False

                order.status = status
                self._store.touch_metadata()
        except StoreError as e:
            raise OrderRepositoryError("Failed to update order status") from e

        logger.info("order status updated: %s -> %s", order_id, status.value)
        return True

    def delete_order(self, order_id: str) -> bool:
        try:
            with self._store.locked() as document:
                remaining = [o for o in document.orders if o.id != order_id]
                if len(remaining) == len(document.orders):
                    return False

                document.orders = remaining
                self._store.touch_metadata()
        except StoreError as e:
            raise OrderRepositoryError("Failed to delete order") from e

        logger.info("order deleted: %s", order_id)
        return True

    def clear(self) -> None:
        try:
            with self._store.locked() as document:
                document.orders = []
                self._store.touch_metadata()
        except StoreError as e:
            raise OrderRepositoryError("Failed to clear orders") from e

        logger.info("all orders cleared")

    def get_stats(self) -> OrderStatsV1:
        try:
            return self._store.compute_stats()
        except StoreError as e:
            raise OrderRepositoryError("Failed to compute order stats") from e
