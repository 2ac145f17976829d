"""Shared order schema (v1).

These models are shared between the backend and the admin client. Field names are
camelCase on the wire and in the database file.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderStatusV1(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ItemSizeV1(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class DateRangeV1(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class OrderItemV1(CamelModel):
    id: str
    name: str
    size: ItemSizeV1
    price: float = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class OrderV1(CamelModel):
    id: str
    items: list[OrderItemV1]
    total_price: float

    # ISO-8601, UTC.
    timestamp: str
    status: OrderStatusV1 = OrderStatusV1.PENDING


class OrderStatsV1(CamelModel):
    total_orders: int
    total_revenue: float
    avg_order_value: float
    last_updated: str
