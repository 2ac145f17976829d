"""POS orders API service entrypoint."""

from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from services.api.app.core.logging import configure_logging
from services.api.app.db.database import JsonDocumentStore, StoreError, StoreNotInitializedError
from services.api.app.db.init_db import init_db
from services.api.app.db.models import utc_now_iso
from services.api.app.errors import register_error_handlers
from services.api.app.routers.order import router as order_router

configure_logging()
logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y"}


def _cors_origins() -> list[str]:
    if os.getenv("POS_ENV", "development").strip().lower() != "production":
        return ["*"]
    raw = os.getenv("POS_CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(store: JsonDocumentStore | None = None) -> FastAPI:
    """Build the API around an explicit store.

    CORS origins come from ``POS_ENV`` / ``POS_CORS_ORIGINS`` when this is called.
    Without a store one is built from ``POS_DB_PATH`` at startup.
    """

    app = FastAPI(title="POS Orders API")
    app.state.store = store
    app.state.started_at = time.monotonic()

    origins = _cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_error_handlers(app)
    app.include_router(order_router)

    @app.on_event("startup")
    def _startup() -> None:
        app.state.store = init_db(store)
        app.state.started_at = time.monotonic()

    @app.on_event("shutdown")
    def _shutdown() -> None:
        current: JsonDocumentStore | None = app.state.store
        if current is None or not current.is_initialized:
            return

        if _env_flag("POS_BACKUP_ON_SHUTDOWN", "true"):
            try:
                current.create_backup()
            except StoreError:
                logger.exception("failed to create shutdown backup")

        current.close()
        logger.info("server shut down complete")

    @app.get("/health")
    def health() -> JSONResponse:
        timestamp = utc_now_iso()
        current: JsonDocumentStore | None = app.state.store
        try:
            if current is None:
                raise StoreNotInitializedError()
            stats = current.compute_stats()
        except StoreError:
            logger.exception("health check failed")
            return JSONResponse(
                status_code=500,
                content={
                    "status": "unhealthy",
                    "timestamp": timestamp,
                    "database": {"connected": False, "error": "Database connection failed"},
                },
            )

        return JSONResponse(
            content={
                "status": "healthy",
                "timestamp": timestamp,
                "uptime": round(time.monotonic() - app.state.started_at, 3),
                "database": {"connected": True, "stats": stats.model_dump(by_alias=True)},
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))
