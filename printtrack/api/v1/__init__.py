"""FastAPI v1 API router and configuration."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from printtrack import __version__
from printtrack.config import get_settings
from printtrack.db import init_db, close_db
from printtrack.errors import (
    AuthenticationError,
    DuplicateIntervalError,
    NotFoundError,
    OctoPrintError,
    OctoPrintNotConfigured,
    PrintTrackError,
    ValidationError,
)
from printtrack.utils import get_logger
from printtrack.api.v1.routes import (
    auth_router,
    printers_router,
    jobs_router,
    maintenance_router,
    dashboard_router,
    export_router,
    octoprint_router,
)

logger = get_logger("api.v1")

API_TITLE = "PrintTrack API"
API_DESCRIPTION = """
PrintTrack - 3D printer, print job and maintenance tracking

## Features
- **Printers**: Printers with optional OctoPrint connection
- **Print Jobs**: Manual and OctoPrint print history
- **Maintenance**: Logs, intervals and due/overdue status
- **Dashboard**: Material usage, print time and maintenance summaries

## Authentication
All endpoints except signup/login require `Authorization: Bearer <token>`.
"""

# Error type -> HTTP status; first match wins
ERROR_STATUS = [
    (NotFoundError, 404),
    (DuplicateIntervalError, 409),
    (ValidationError, 422),
    (AuthenticationError, 401),
    (OctoPrintNotConfigured, 400),
    (OctoPrintError, 502),
]


def status_for(exc: PrintTrackError) -> int:
    """HTTP status for a PrintTrack error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting PrintTrack API...")
    await init_db()
    yield
    logger.info("Shutting down PrintTrack API...")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=API_TITLE,
        version=__version__,
        description=API_DESCRIPTION,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    # CORS configuration
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(printers_router, prefix="/api/v1/printers", tags=["Printers"])
    app.include_router(octoprint_router, prefix="/api/v1/printers", tags=["OctoPrint"])
    app.include_router(jobs_router, prefix="/api/v1/jobs", tags=["Print Jobs"])
    app.include_router(maintenance_router, prefix="/api/v1/maintenance", tags=["Maintenance"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(export_router, prefix="/api/v1/export", tags=["Export"])

    @app.exception_handler(PrintTrackError)
    async def printtrack_exception_handler(request: Request, exc: PrintTrackError):
        code = status_for(exc)
        if code >= 500:
            logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    # Health check endpoints
    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "version": __version__}

    @app.get("/api/v1/health", tags=["Health"])
    async def api_health_check():
        return {"status": "healthy", "version": __version__}

    return app
