from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from packages.shared.schemas.order_v1 import DateRangeV1, OrderStatusV1
from services.api.app.db.deps import get_repository
from services.api.app.models.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderDetailResponse,
    OrderFilters,
    OrderListResponse,
    StatsResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from services.api.app.services.order_builder import build_order
from services.api.app.services.order_query import query_orders
from services.api.app.services.order_repository import OrderRepository, OrderRepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders")


def _raise_storage_http_error(e: OrderRepositoryError) -> None:
    logger.exception("order storage failure: %s", e)
    raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("", status_code=201, response_model=CreateOrderResponse)
def create_order(
    payload: CreateOrderRequest, repository: OrderRepository = Depends(get_repository)
) -> CreateOrderResponse:
    order = build_order(payload.items)
    try:
        repository.add_order(order)
    except OrderRepositoryError as e:
        _raise_storage_http_error(e)

    logger.info("new order created: %s total=%.2f", order.id, order.total_price)
    return CreateOrderResponse(
        order_id=order.id,
        timestamp=order.timestamp,
        message="Order created successfully",
    )


@router.get("", response_model=OrderListResponse)
def list_orders(
    status: OrderStatusV1 | None = Query(default=None),
    search: str | None = Query(default=None),
    date_range: DateRangeV1 | None = Query(default=None, alias="dateRange"),
    repository: OrderRepository = Depends(get_repository),
) -> OrderListResponse:
    try:
        orders = query_orders(repository, status=status, search=search, date_range=date_range)
        stats = repository.get_stats()
    except OrderRepositoryError as e:
        _raise_storage_http_error(e)

    return OrderListResponse(
        orders=orders,
        count=len(orders),
        stats=stats,
        filters=OrderFilters(status=status, search=search, date_range=date_range),
    )


@router.get("/api/stats", response_model=StatsResponse)
def get_stats(repository: OrderRepository = Depends(get_repository)) -> StatsResponse:
    try:
        stats = repository.get_stats()
    except OrderRepositoryError as e:
        _raise_storage_http_error(e)

    return StatsResponse(stats=stats)


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: str, repository: OrderRepository = Depends(get_repository)
) -> OrderDetailResponse:
    try:
        order = repository.get_order_by_id(order_id)
    except OrderRepositoryError as e:
        _raise_storage_http_error(e)

    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    return OrderDetailResponse(order=order)


@router.patch("/{order_id}/status", response_model=StatusUpdateResponse)
def update_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    repository: OrderRepository = Depends(get_repository),
) -> StatusUpdateResponse:
    try:
        updated = repository.update_order_status(order_id, payload.status)
    except OrderRepositoryError as e:
        _raise_storage_http_error(e)

    if not updated:
        raise HTTPException(status_code=404, detail="Order not found")

    return StatusUpdateResponse(message=f"Order status updated to {payload.status.value}")
