"""
Wanderlust Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error handling
       and lifecycle management in one place.
How:   create_app() builds a fresh FastAPI instance; nothing is created at
       import time. The server entry point (run(), or
       `uvicorn --factory wanderlust.main:create_app`) calls it once.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ Method Over. │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /listings    │ │ /reviews │ │ / and /health   │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Error Handler (renders the `error` view):          │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from wanderlust import __version__
from wanderlust.config import settings
from wanderlust.database import dispose_engine
from wanderlust.exceptions import RouteNotFoundError, WanderlustError
from wanderlust.middleware.logging import RequestLoggingMiddleware
from wanderlust.middleware.method_override import MethodOverrideMiddleware
from wanderlust.middleware.request_id import RequestIDMiddleware, request_id_var
from wanderlust.routes import health, listings, reviews
from wanderlust.validation import format_error
from wanderlust.views import error_page

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo is controlled by LOG_LEVEL=DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("%s %s starting up...", settings.app_name, __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("%s shutting down...", settings.app_name)
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Error Handler
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Route every failure to error_page().

    Handler hierarchy:
        WanderlustError         → its own status (400 / 404 / 500) and message
        HTTPException 404/405   → RouteNotFoundError, "Page not found!"
        HTTPException other     → its status and detail
        RequestValidationError  → 400 with the joined field messages

    Any other exception is turned into the generic 500 page by
    RequestLoggingMiddleware, inside the request-ID and access-log chain.
    """

    @app.exception_handler(WanderlustError)
    async def handle_domain_error(request: Request, exc: WanderlustError):
        rid = request_id_var.get("")
        status_code = getattr(exc, "status_code", None) or 500
        if status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_page(status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported verbs on known paths both mean "no route"
        if exc.status_code in (404, 405):
            return await handle_domain_error(
                request, RouteNotFoundError(path=request.url.path, method=request.method)
            )
        return error_page(exc.status_code, str(exc.detail) if exc.detail else None)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = ",".join(format_error(err) for err in exc.errors())
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return error_page(400, message)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: a fully configured instance; tests build their own per test.
    """
    app = FastAPI(
        title=f"{settings.app_name}",
        description="Property listings with reviews, rendered on the server.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # MethodOverride → RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(MethodOverrideMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(listings.router)
    app.include_router(reviews.router)

    return app


def run() -> None:
    """Console entry point: serve a freshly created app with uvicorn."""
    uvicorn.run(
        "wanderlust.main:create_app",
        factory=True,
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
