"""
FoodCycle Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles settings, the token service, the document store
       client, middleware, exception handlers and routers, then verifies that
       no (method, path) pair is registered twice.
Who:   uvicorn imports `foodcycle.main:app`; tests call create_app() with their
       own settings and an in-memory database.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access Log → CORS        │
    │                                                     │
    │  Routes:  /jwt /logout  /available-foods ...        │
    │           /my-foods /my-requests (cookie auth)      │
    │                                                     │
    │  app.state: settings, token_service,                │
    │             mongo_client, database                  │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 Auth→401 Forbidden→403 NotFound→404│
    │   Conflict→409 Database→500 Unexpected→500          │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, not fatal)
    3. Ping the document store with retries; ensure indexes
       - failure: log and keep serving, or abort when
         DB_ABORT_ON_STARTUP_FAILURE is set
    Shutdown:
    1. Close the document store client
"""

import logging
import secrets
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from foodcycle import __version__
from foodcycle.auth import TokenService
from foodcycle.config import Settings, get_settings
from foodcycle.database import close_client, create_client, ensure_indexes, ping
from foodcycle.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from foodcycle.middleware.logging import RequestLoggingMiddleware
from foodcycle.middleware.request_id import RequestIDMiddleware, request_id_var
from foodcycle.routes import auth, ensure_unique_routes, food_requests, foods, health, newsletter
from foodcycle.schemas.common import ErrorResponse

ROUTERS = (health.router, auth.router, foods.router, food_requests.router, newsletter.router)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] foodcycle.access: GET /available-foods 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request lines come from foodcycle.access; the driver logs every heartbeat at DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: AsyncIOMotorDatabase = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("FoodCycle Backend starting up (%s)...", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await ping(database, attempts=settings.db_startup_attempts)
        logger.info("Connected to MongoDB database '%s'", settings.mongodb_db_name)
        await ensure_indexes(database)
    except PyMongoError as e:
        logger.error("Error connecting to MongoDB: %s", str(e))
        if settings.db_abort_on_startup_failure:
            raise RuntimeError("Document store unreachable at startup") from e
        logger.warning("Serving without a reachable document store; store-backed routes will fail")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("FoodCycle Backend shutting down...")
    close_client(app.state.mongo_client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        details=details,
        request_id=request_id_var.get("") or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP error envelopes.

    Handler hierarchy:
        ValidationError      → 400
        AuthenticationError  → 401 (details.reason: absent | expired | invalid_signature | malformed)
        AuthorizationError   → 403
        NotFoundError        → 404
        ConflictError        → 409
        DatabaseError        → 500 (operation message only; driver detail stays in the log)
        Exception (fallback) → 500

    Schema validation failures keep FastAPI's default 422 response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "unauthorized", exc.message, {"reason": exc.reason})

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        logger.warning("[%s] Forbidden: %s", request_id_var.get(""), exc.context)
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, "conflict", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[AsyncIOMotorDatabase] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration to use; the process settings when omitted.
        database: an already-built database object. When omitted, a motor
                  client is created (connecting lazily) and owned by the app.

    Raises:
        DuplicateRouteError: two handlers share a method and path.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="FoodCycle API",
        description="Backend for the FoodCycle food-sharing app: donated foods, requests and newsletter.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Owned Resources ───────────────────────────────────────────────────
    app.state.settings = settings

    secret = settings.access_token_secret
    if not secret:
        # Tokens signed with a per-process secret stop verifying after a restart
        logger.warning("ACCESS_TOKEN_SECRET is not set; using a random per-process secret")
        secret = secrets.token_urlsafe(32)
    app.state.token_service = TokenService(secret, timedelta(hours=settings.token_ttl_hours))

    client = None
    if database is None:
        client = create_client(settings)
        database = client[settings.mongodb_db_name]
    app.state.mongo_client = client
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: Request ID → Access Log → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    ensure_unique_routes(ROUTERS)
    for router in ROUTERS:
        app.include_router(router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "foodcycle.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
