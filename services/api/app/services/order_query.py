from __future__ import annotations

from datetime import datetime, timedelta, timezone

from packages.shared.schemas.order_v1 import DateRangeV1, OrderStatusV1, OrderV1
from services.api.app.services.order_repository import OrderRepository, sort_newest_first

_ROLLING_WINDOWS = {
    DateRangeV1.WEEK: timedelta(days=7),
    DateRangeV1.MONTH: timedelta(days=30),
    DateRangeV1.YEAR: timedelta(days=365),
}


def date_range_bounds(date_range: DateRangeV1, now: datetime) -> tuple[datetime, datetime]:
    """Resolve a named range to ``(start, now)``. ``today`` starts at 00:00 UTC."""

    now = now.astimezone(timezone.utc)
    if date_range is DateRangeV1.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0), now
    return now - _ROLLING_WINDOWS[date_range], now


def query_orders(
    repository: OrderRepository,
    *,
    status: OrderStatusV1 | None = None,
    search: str | None = None,
    date_range: DateRangeV1 | None = None,
    now: datetime | None = None,
) -> list[OrderV1]:
    if date_range is not None:
        start, end = date_range_bounds(date_range, now or datetime.now(timezone.utc))
        orders = sort_newest_first(repository.get_orders_by_date_range(start, end))
    else:
        orders = repository.get_all_orders()

    if status is not None:
        orders = [o for o in orders if o.status == status]

    needle = (search or "").strip().lower()
    if needle:
        orders = [o for o in orders if any(needle in item.name.lower() for item in o.items)]

    return orders
