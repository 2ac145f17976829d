"""Translate framework errors into the ``{success, message}`` error body."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from services.api.app.models.order import ORDER_TOTAL_TOO_LARGE, ErrorResponse

logger = logging.getLogger(__name__)

ITEMS_REQUIRED_MESSAGE = "Items array is required and cannot be empty"
STATUS_REQUIRED_MESSAGE = "Valid status is required (pending, completed, cancelled)"

_ITEM_FIELD_MESSAGES = {
    "name": "Name is required and cannot be empty",
    "size": "Size must be 'small', 'medium', or 'large'",
    "price": "Price must be a positive number",
    "quantity": "Quantity must be a positive integer",
}

_QUERY_MESSAGES = {
    "status": "Invalid status filter. Must be one of: pending, completed, cancelled",
    "dateRange": "Invalid dateRange filter. Must be one of: today, week, month, year",
}


def validation_message(errors: Sequence[dict[str, Any]]) -> str:
    """Pick a client-facing message for the first validation error."""

    if not errors:
        return "Invalid request"

    loc = tuple(errors[0].get("loc", ()))
    source, path = (loc[0], loc[1:]) if loc else ("", ())

    if source == "query" and path:
        return _QUERY_MESSAGES.get(str(path[0]), f"Invalid query parameter: {path[0]}")

    if source != "body":
        return "Invalid request"

    if errors[0].get("type") == "json_invalid":
        return "Request body must be valid JSON"

    if not path:
        return "Request body is required"

    if path[0] == "items":
        if len(path) >= 2 and isinstance(path[1], int):
            index = path[1]
            field = path[2] if len(path) >= 3 else None
            detail = _ITEM_FIELD_MESSAGES.get(str(field), "Item must be an object")
            return f"Item {index + 1}: {detail}"
        if errors[0].get("type") == "value_error":
            return ORDER_TOTAL_TOO_LARGE
        return ITEMS_REQUIRED_MESSAGE

    if path[0] == "status":
        return STATUS_REQUIRED_MESSAGE

    return f"Invalid field: {path[0]}"


def _error_body(message: str) -> dict[str, Any]:
    return ErrorResponse(message=message).model_dump(by_alias=True)


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=_error_body(validation_message(exc.errors())))


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = "Endpoint not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
