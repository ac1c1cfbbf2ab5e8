"""Application factory.

``create_app`` wires configuration, logging, the database and the asset
service into a FastAPI instance. Nothing is shared between two apps built by
separate calls; each owns its engine and disposes of it on shutdown.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import AppSettings, get_settings
from .core.errors import (
    StorageError,
    http_exception_handler,
    storage_exception_handler,
    validation_exception_handler,
)
from .core.logging import configure_logging
from .db.session import build_engine, build_session_factory, init_db
from .middlewares import RequestIdMiddleware
from .routers import api_assets
from .services.assets import AssetService
from .services.duplicates import strategy_for


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = build_engine(settings.DB_URL)
    init_db(engine)
    session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.asset_service = AssetService(
        session_factory,
        strategy=strategy_for(settings.DUPLICATE_STRATEGY),
    )

    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)

    app.include_router(api_assets.router)

    if settings.METRICS_ENABLED:
        # One registry per app so several apps can live in one process.
        instrumentator = Instrumentator(registry=CollectorRegistry())
        instrumentator.instrument(app).expose(app, include_in_schema=False)
        app.state.instrumentator = instrumentator

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
