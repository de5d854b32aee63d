"""
Hometown Content Server — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the stores, middleware, exception handlers,
       routers and static mounts; the module-level `app` is what uvicorn runs.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────────────┐      │
    │  │  CORS    │→│ Req ID   │→│  Access log     │      │
    │  └──────────┘ └──────────┘ └─────────────────┘      │
    │                                                     │
    │  Routes:                                            │
    │  POST /api/upload   GET|POST /api/data   GET /health│
    │                                                     │
    │  Static mounts (after routes):                      │
    │  /uploads → upload dir       / → site root          │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ Storage/Document→500 │ *→500 │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the front-end and admin URLs
    Shutdown: log only (no pooled resources to release)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from hometown_server import __version__
from hometown_server.config import ALLOWED_UPLOAD_TYPES, SERVER_PORT, Settings, settings
from hometown_server.exceptions import (
    INTERNAL_ERROR,
    INVALID_DATA_FORMAT,
    HometownServerError,
    ValidationError,
)
from hometown_server.middleware import (
    PermissiveCORSMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    request_id_var,
)
from hometown_server.middleware.cors import CORS_HEADERS
from hometown_server.routes import content, health, upload
from hometown_server.services import DocumentStore, UploadStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # Our access log replaces uvicorn's.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    setup_logging(config.log_level)

    logger.info("Hometown content server %s starting on port %d", __version__, SERVER_PORT)
    logger.info("Site root: %s", config.site_root_path)
    logger.info("Content document: %s", config.data_file_path)
    logger.info("Upload directory: %s", config.upload_dir_path)
    if not app.state.document_store.is_readable():
        logger.warning(
            "Content document %s is missing or unreadable; GET /api/data will fail until it exists",
            config.data_file_path,
        )
    logger.info("Front-end: http://localhost:%d", SERVER_PORT)
    logger.info("Admin page: http://localhost:%d/admin.html", SERVER_PORT)

    yield

    logger.info("Hometown content server shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to `{"error": message}` responses.

    Handler hierarchy:
        ValidationError         → 400 (message shown to the client)
        RequestValidationError  → 400 (malformed JSON body)
        HometownServerError     → its status_code, context logged server-side
        Exception (fallback)    → 500, traceback logged server-side
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request body: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": INVALID_DATA_FORMAT})

    @app.exception_handler(HometownServerError)
    async def handle_server_error(request: Request, exc: HometownServerError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack, so CORS headers are added here.
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": INTERNAL_ERROR},
            headers=CORS_HEADERS,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings override (tests pass one rooted in a tmp directory).
                Defaults to the module-level `settings`.
    """
    config = config or settings

    app = FastAPI(
        title="Hometown Content Server",
        description=(
            "Uploads images/audio and stores the site's content document "
            "(hometowns, banner, audio story, products)."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.upload_store = UploadStore(
        upload_dir=config.upload_dir_path,
        max_size=config.max_upload_size,
        allowed_types=ALLOWED_UPLOAD_TYPES,
    )
    app.state.document_store = DocumentStore(config.data_file_path)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost: CORS → RequestID → Logging → app
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PermissiveCORSMiddleware)

    register_exception_handlers(app)

    app.include_router(upload.router)
    app.include_router(content.router)
    app.include_router(health.router)

    # ── Static Files ──────────────────────────────────────────────────────
    # Mounted last so API routes take precedence. The site root is served
    # wholesale, data.json and anything else placed there included.
    app.mount(
        "/uploads",
        StaticFiles(directory=str(config.upload_dir_path)),
        name="uploads",
    )
    app.mount(
        "/",
        StaticFiles(directory=str(config.site_root_path), html=True),
        name="site",
    )

    return app


app = create_app()
