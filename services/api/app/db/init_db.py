from __future__ import annotations

import logging

from services.api.app.db.database import JsonDocumentStore

logger = logging.getLogger(__name__)


def init_db(store: JsonDocumentStore | None = None) -> JsonDocumentStore:
    """Load (or create) the database file. Errors are fatal to startup."""

    if store is None:
        store = JsonDocumentStore.from_env()

    logger.info("initializing database: %s", store.path)
    store.initialize()
    return store
