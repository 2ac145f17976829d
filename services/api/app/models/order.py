from __future__ import annotations

import math
from typing import Annotated

from packages.shared.schemas.order_v1 import (
    CamelModel,
    DateRangeV1,
    ItemSizeV1,
    OrderStatsV1,
    OrderStatusV1,
    OrderV1,
)
from pydantic import Field, StrictStr, field_validator

ORDER_TOTAL_TOO_LARGE = "Order total is too large"


class OrderItemInput(CamelModel):
    name: StrictStr
    size: ItemSizeV1
    price: Annotated[float, Field(gt=0, strict=True, allow_inf_nan=False)]
    quantity: Annotated[int, Field(gt=0, strict=True)]

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name cannot be empty")
        return value


class CreateOrderRequest(CamelModel):
    items: list[OrderItemInput] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def _total_is_finite(cls, items: list[OrderItemInput]) -> list[OrderItemInput]:
        # Totals are rounded in cents, so the cent amount must stay finite too.
        total = sum(item.price * item.quantity for item in items)
        if not math.isfinite(total * 100):
            raise ValueError(ORDER_TOTAL_TOO_LARGE)
        return items


class CreateOrderResponse(CamelModel):
    success: bool = True
    order_id: str
    timestamp: str
    message: str


class OrderFilters(CamelModel):
    status: OrderStatusV1 | None = None
    search: str | None = None
    date_range: DateRangeV1 | None = None


class OrderListResponse(CamelModel):
    success: bool = True
    orders: list[OrderV1]
    count: int
    stats: OrderStatsV1
    filters: OrderFilters


class OrderDetailResponse(CamelModel):
    success: bool = True
    order: OrderV1


class StatusUpdateRequest(CamelModel):
    status: OrderStatusV1


class StatusUpdateResponse(CamelModel):
    success: bool = True
    message: str


class StatsResponse(CamelModel):
    success: bool = True
    stats: OrderStatsV1


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
