"""
NoteVault Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app(settings)` builds every configuration-dependent component
       exactly once and stores it on `app.state`:

           app.state.settings       Settings (frozen)
           app.state.database       Database (engine + session factory)
           app.state.token_service  TokenService (signing secret, expiry)
           app.state.auth_service   AuthService (hasher + token service)

       Handlers and dependencies read these from the request; nothing is
       held in module globals.
Who:   uvicorn (`uvicorn notevault.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │  Middleware:  Request ID → Logging → CORS                │
    │  Routes:      /register /login        (public)           │
    │               /notes, /notes/{id}     (auth gate)        │
    │               /health, /              (public)           │
    │  Handlers:    NoteVaultError subclasses → 400/401/404/500│
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notevault import __version__
from notevault.config import Settings, get_settings
from notevault.database import Database
from notevault.exceptions import (
    DuplicateCredentialError,
    InvalidCredentialsError,
    InvalidTokenError,
    NoteVaultError,
    NotFoundOrUnauthorizedError,
    StorageFaultError,
    UnauthenticatedError,
    ValidationError,
)
from notevault.middleware.logging import RequestLoggingMiddleware
from notevault.middleware.request_id import RequestIDMiddleware, request_id_var
from notevault.routes import auth, health, notes
from notevault.services.auth_service import AuthService
from notevault.services.password_service import PasswordHasher
from notevault.services.token_service import TokenService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once from the lifespan, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Configure logging
        2. Validate security-critical settings (fail fast in production)
    Shutdown:
        1. Dispose the database engine
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("NoteVault Backend starting up (environment=%s)", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.critical("Configuration error: %s", e)
        raise

    logger.info(
        "Token lifetime %d min, bcrypt rounds %d",
        settings.access_token_expire_minutes,
        settings.bcrypt_rounds,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("NoteVault Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler table:
        ValidationError               → 400 validation_error
        DuplicateCredentialError      → 400 duplicate_credential
        InvalidCredentialsError       → 400 invalid_credentials
        UnauthenticatedError          → 401 unauthenticated
        InvalidTokenError             → 401 invalid_token
        NotFoundOrUnauthorizedError   → 404 not_found
        StorageFaultError             → 500 storage_fault
        NoteVaultError (base)         → 500 server_error
        Exception (fallback)          → 500 internal_server_error

    Authentication, credential and storage errors never echo their context
    to the client; it is logged instead.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, details=exc.context)

    @app.exception_handler(DuplicateCredentialError)
    async def handle_duplicate_credential(request: Request, exc: DuplicateCredentialError):
        logger.info("[%s] Duplicate credential: %s", request_id_var.get(""), exc.context)
        return _error_response(400, "duplicate_credential", exc.message)

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        # reason (unknown_email / wrong_password) stays server-side
        logger.info(
            "[%s] Invalid credentials (%s)", request_id_var.get(""), exc.context.get("reason", "-")
        )
        return _error_response(400, "invalid_credentials", exc.message)

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        return _error_response(401, "unauthenticated", exc.message, headers=_BEARER_CHALLENGE)

    @app.exception_handler(InvalidTokenError)
    async def handle_invalid_token(request: Request, exc: InvalidTokenError):
        return _error_response(401, "invalid_token", exc.message, headers=_BEARER_CHALLENGE)

    @app.exception_handler(NotFoundOrUnauthorizedError)
    async def handle_not_found(request: Request, exc: NotFoundOrUnauthorizedError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(StorageFaultError)
    async def handle_storage_fault(request: Request, exc: StorageFaultError):
        logger.error(
            "[%s] Storage fault: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error_response(500, "storage_fault", exc.message)

    @app.exception_handler(NoteVaultError)
    async def handle_app_error(request: Request, exc: NoteVaultError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace logged server-side only."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build the app from. Defaults to the
                  environment-derived process settings.

    Returns:
        Fully configured FastAPI instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="NoteVault API",
        description=(
            "Multi-user note-taking service. Register, log in for a bearer token, "
            "and manage notes that only you can see."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # ── Components built once from configuration ─────────────────────────
    tokens = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = tokens
    app.state.auth_service = AuthService(
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=tokens,
    )

    # ── Middleware (last added executes first) ────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/", tags=["General"], summary="Welcome message")
    async def root() -> dict:
        return {"message": "Welcome to NoteVault!"}

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
