"""
StuntCheck Gateway — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn stuntcheck.main:app` or `python -m stuntcheck`).
When:  Once at server startup.

Application Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                     FastAPI App                       │
    │                                                       │
    │  Middleware Chain:                                    │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────┐ ┌──────┐  │
    │  │  Req ID  │→│ Logging  │→│ Auth (gate)  │→│ CORS │  │
    │  └──────────┘ └──────────┘ └──────────────┘ └──────┘  │
    │                                                       │
    │  Routes:                                              │
    │  /api/auth  /api/children  /api/predict(ions)         │
    │  /api/check(ing)-flask  /health  /                    │
    │                                                       │
    │  Exception Handlers:                                  │
    │  Validation→400 │ Auth→401 │ NotFound→404 │           │
    │  Store/Identity→400 │ Inference→500 │ other→500       │
    └───────────────────────────────────────────────────────┘

Route registry:
    Routes live in explicit APIRouter modules and are included below; the
    app's own route table (`app.routes`) is the only registry.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stuntcheck import __version__
from stuntcheck.config import settings
from stuntcheck.database import dispose_engine
from stuntcheck.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    InferenceServiceError,
    InferenceUnavailableError,
    NotFoundError,
    StoreError,
    StuntCheckError,
    ValidationError,
)
from stuntcheck.middleware.auth import AuthenticationMiddleware
from stuntcheck.middleware.logging import RequestLoggingMiddleware
from stuntcheck.middleware.request_id import RequestIDMiddleware, request_id_var
from stuntcheck.routes import auth, children, diagnostics, health, predictions

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every request at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check. Shutdown: dispose the engine.

    A configuration problem is logged but does not stop the server, so
    /health and the diagnostics stay reachable.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("StuntCheck Gateway starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    logger.info("Inference service: %s", settings.inference_predict_url)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("StuntCheck Gateway shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details=None, headers=None) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for the canonical error envelope.

    Handler map:
        ValidationError / RequestValidationError → 400 validation_error
        AuthenticationError                      → 401 unauthorized
        NotFoundError                            → 404 not_found
        StoreError                               → 400 store_error
        IdentityProviderError                    → 400 identity_error
        InferenceServiceError                    → 500 inference_error
        StuntCheckError (base)                   → 500 server_error
        HTTPException (unknown route, 405)       → its status, http_error
        Exception (fallback)                     → 500 internal_server_error
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        message = "; ".join(
            f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors
        ) or "Invalid request"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return _error(400, "validation_error", message, {"errors": errors})

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error(401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        # Context (the requested id) stays server-side
        logger.info("[%s] Not found: %s", request_id_var.get(""), exc.context)
        return _error(404, "not_found", exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error(400, "store_error", exc.message)

    @app.exception_handler(IdentityProviderError)
    async def handle_identity_error(request: Request, exc: IdentityProviderError):
        logger.warning("[%s] Identity provider error: %s", request_id_var.get(""), exc.message)
        return _error(400, "identity_error", exc.message)

    @app.exception_handler(InferenceUnavailableError)
    async def handle_inference_unavailable(request: Request, exc: InferenceUnavailableError):
        logger.error("[%s] Inference status probe failed: %s", request_id_var.get(""), exc.context)
        return _error(500, "inference_error", exc.message, {"error": exc.context.get("error")})

    @app.exception_handler(InferenceServiceError)
    async def handle_inference_error(request: Request, exc: InferenceServiceError):
        # Transport detail is logged only
        logger.error("[%s] Inference error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error(500, "inference_error", exc.message)

    @app.exception_handler(StuntCheckError)
    async def handle_gateway_error(request: Request, exc: StuntCheckError):
        logger.error("[%s] Gateway error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error(500, "server_error", exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, "http_error", str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace logged server-side only."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns a fresh instance on every call; tests build their own app and
    override dependencies on it.
    """
    app = FastAPI(
        title="StuntCheck API",
        description=(
            "Backend-for-frontend for child stunting screening: accounts, child "
            "growth profiles and stunting predictions backed by a remote model."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition:
    # RequestID → Logging → Authentication → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(children.router)
    app.include_router(predictions.router)
    app.include_router(diagnostics.router)
    app.include_router(health.router)

    return app


app = create_app()
