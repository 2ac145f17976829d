from __future__ import annotations

from datetime import datetime, timezone

from packages.shared.schemas.order_v1 import CamelModel, OrderV1
from pydantic import Field

DOCUMENT_VERSION = "1.0.0"


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value))


class DatabaseMetadata(CamelModel):
    version: str = DOCUMENT_VERSION
    created_at: str = Field(default_factory=utc_now_iso)
    last_updated: str = Field(default_factory=utc_now_iso)


class DatabaseDocument(CamelModel):
    orders: list[OrderV1] = Field(default_factory=list)
    metadata: DatabaseMetadata = Field(default_factory=DatabaseMetadata)
