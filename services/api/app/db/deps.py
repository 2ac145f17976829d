from __future__ import annotations

from fastapi import Request
from services.api.app.db.database import JsonDocumentStore
from services.api.app.services.order_repository import OrderRepository


def get_store(request: Request) -> JsonDocumentStore:
    return request.app.state.store


def get_repository(request: Request) -> OrderRepository:
    return OrderRepository(get_store(request))
