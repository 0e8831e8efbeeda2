"""
HerbScape Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn herbscape.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐          │
    │  │  Req ID  │→│ Logging │→│ GZip │→│ CORS │          │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘          │
    │                                                      │
    │  Routes:                                             │
    │  ┌──────────┐ ┌──────────┐ ┌───────────┐ ┌────────┐  │
    │  │ GET /    │ │ /api/... │ │ /auth/... │ │/health │  │
    │  └──────────┘ └──────────┘ └───────────┘ └────────┘  │
    │                                                      │
    │  Exception Handlers:                                 │
    │  ┌────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404       │  │
    │  │ Remote/Remedies→503 │ DB→500 │ other→500       │  │
    │  └────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Log startup complete

    Shutdown:
    1. Dispose client pages (auth subscriptions)
    2. Dispose database engine (close all connections)
    3. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from herbscape import __version__
from herbscape.catalog.registry import page_registry
from herbscape.config import settings
from herbscape.database import dispose_engine
from herbscape.exceptions import (
    AuthenticationError,
    DatabaseError,
    HerbScapeError,
    NotFoundError,
    RemedyServiceError,
    RemoteFunctionError,
    ValidationError,
)
from herbscape.middleware.logging import RequestLoggingMiddleware
from herbscape.middleware.request_id import RequestIDMiddleware, request_id_var
from herbscape.routes import api, auth, health, pages

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("HerbScape Backend starting up...")

    # Not fatal: without Supabase the catalog still renders
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("Catalog variant: %s", settings.catalog_variant)
    logger.info("Supabase project: %s", settings.supabase_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("HerbScape Backend shutting down...")
    page_registry.clear()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions that escape a route to JSON error responses.

    Handler hierarchy:
        ValidationError        → 400 Bad Request
        AuthenticationError    → 401 Unauthorized
        NotFoundError          → 404 Not Found
        RemoteFunctionError    → 503 Service Unavailable
        RemedyServiceError     → 503 Service Unavailable
        DatabaseError          → 500 Internal Server Error
        HerbScapeError (base)  → 500 Internal Server Error
        Exception (fallback)   → 500 Internal Server Error

    Catalog components turn their own failures into toasts; these handlers
    only see what a route lets through. Responses never carry stack traces.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "authentication_error", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(RemoteFunctionError)
    async def handle_remote_function_error(request: Request, exc: RemoteFunctionError):
        logger.error("[%s] Remote function error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(503, "remote_function_error", exc.message)

    @app.exception_handler(RemedyServiceError)
    async def handle_remedy_service_error(request: Request, exc: RemedyServiceError):
        logger.error("[%s] Remedies webhook error: %s", request_id_var.get(""), exc.message)
        return _error_response(503, "remedy_service_error", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Full context stays in the server log
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(HerbScapeError)
    async def handle_herbscape_error(request: Request, exc: HerbScapeError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="HerbScape",
        description=(
            "Herb and plant catalog with search, category filtering, photo-based "
            "plant identification, a remedies assistant and translated herb records."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(pages.router)
    app.include_router(api.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
