from __future__ import annotations

import argparse
import os
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

from packages.shared.schemas.order_v1 import ItemSizeV1, OrderStatusV1
from services.api.app.db.database import JsonDocumentStore
from services.api.app.db.init_db import init_db
from services.api.app.models.order import OrderItemInput
from services.api.app.services.order_builder import build_order
from services.api.app.services.order_repository import OrderRepository

MENU = (
    ("Latte", 4.50),
    ("Cappuccino", 4.25),
    ("Americano", 3.00),
    ("Muffin", 2.25),
    ("Croissant", 3.10),
    ("Bagel", 2.80),
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo POS orders")
    parser.add_argument(
        "--db-path",
        default=os.getenv("POS_DB_PATH", "data/db.json"),
        help="Database file (default: data/db.json)",
    )
    parser.add_argument("--count", type=int, default=20)
    parser.add_argument(
        "--days",
        type=int,
        default=30,
        help="Spread order timestamps over the last N days (default: 30)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--clear", action="store_true", help="Remove existing orders first")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    store = init_db(JsonDocumentStore(Path(args.db_path)))
    repository = OrderRepository(store)

    if args.clear:
        repository.clear()

    now = datetime.now(timezone.utc)
    for _ in range(args.count):
        items = [
            OrderItemInput(
                name=name,
                size=rng.choice(list(ItemSizeV1)),
                price=price,
                quantity=rng.randint(1, 3),
            )
            for name, price in rng.sample(MENU, k=rng.randint(1, 3))
        ]
        created = now - timedelta(minutes=rng.randint(0, args.days * 24 * 60))
        order = build_order(
            items,
            timestamp=created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
        order.status = rng.choice(list(OrderStatusV1))
        repository.add_order(order)

    print(f"Seeded {args.count} orders into {store.path} (total={repository.count_orders()})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
