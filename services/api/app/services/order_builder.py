from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from packages.shared.schemas.order_v1 import OrderItemV1, OrderStatusV1, OrderV1
from services.api.app.db.database import round2
from services.api.app.db.models import utc_now_iso
from services.api.app.models.order import OrderItemInput


def build_order(items: Sequence[OrderItemInput], timestamp: str | None = None) -> OrderV1:
    """Assign ids, price the items and stamp a new pending order."""

    order_items = [
        OrderItemV1(
            id=str(uuid4()),
            name=item.name,
            size=item.size,
            price=item.price,
            quantity=item.quantity,
        )
        for item in items
    ]
    total = sum(item.price * item.quantity for item in order_items)

    return OrderV1(
        id=str(uuid4()),
        items=order_items,
        total_price=round2(total),
        timestamp=timestamp or utc_now_iso(),
        status=OrderStatusV1.PENDING,
    )
