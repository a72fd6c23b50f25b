"""
SiteList Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to one key-value store.
Who:   Called by uvicorn (uvicorn sitelist.main:app) and by the test suite,
       which passes its own MemoryStore.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  [Request ID] → [Logging]               │
    │                                                      │
    │  Route:       /{full_path:path}  (every method)      │
    │               → preflight | API | 405 | asset | index│
    │                                                      │
    │  Exception Handlers:                                 │
    │   ApiError   → text/plain + CORS (400/405/500)       │
    │   AssetError → text/plain (404/500)                  │
    │   Exception  → 500                                   │
    └──────────────────────────────────────────────────────┘

    OpenAPI/docs routes are disabled: every path belongs to the gateway, and
    /docs must fall through to the index document like any other path.

Lifecycle:
    Startup:  configure logging, create the SQL schema if enabled
    Shutdown: close the store (disposes the SQL engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from sitelist import __version__
from sitelist.config import settings
from sitelist.exceptions import ApiError, AssetError
from sitelist.middleware.logging import RequestLoggingMiddleware
from sitelist.middleware.request_id import RequestIDMiddleware, request_id_var
from sitelist.routes import gateway
from sitelist.routing import cors_headers
from sitelist.services.asset_service import AssetService
from sitelist.services.collection_service import CollectionService
from sitelist.storage import KeyValueStore, create_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. For the sql backend with DB_AUTO_CREATE, create kv_entries if missing
    Shutdown:
        1. Close the store
    """
    setup_logging()
    store: KeyValueStore = app.state.store
    logger.info("SiteList %s starting (store=%s)", __version__, type(store).__name__)

    create_schema = getattr(store, "create_schema", None)
    if create_schema is not None and settings.db_auto_create:
        await create_schema()
        logger.info("Database schema ready")

    logger.info("Serving on http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("SiteList shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception families to plain-text responses.

    Handler hierarchy:
        ApiError    → exc.status_code, exc.message, CORS headers
        AssetError  → exc.status_code, exc.message, text/plain only
        Exception   → 500 (unexpected; full trace logged)

    Response bodies are the fixed messages on the exceptions. Context and
    chained causes go to the log only.
    """

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s | Context: %s | Cause: %r",
                rid, exc.message, exc.context, exc.__cause__,
            )
        else:
            logger.warning("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(
            exc.message,
            status_code=exc.status_code,
            headers=cors_headers(),
        )

    @app.exception_handler(AssetError)
    async def handle_asset_error(request: Request, exc: AssetError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.debug("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return PlainTextResponse("Internal Server Error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Backend to use. Defaults to create_store() (STORE_BACKEND).

    The store and both services are attached to app.state so the gateway's
    dependencies resolve them per request, with or without the lifespan
    having run (httpx's ASGITransport does not run it).
    """
    app = FastAPI(
        title="SiteList API",
        description="Website submission list stored as one JSON array in a key-value store.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    store = store if store is not None else create_store()
    app.state.store = store
    app.state.collection_service = CollectionService(store, key=settings.collection_key)
    app.state.asset_service = AssetService(store)

    # Last added = first to execute
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(gateway.router)

    return app


app = create_app()
