"""
FastAPI Application Entry Point

The Pizza Box storefront API.

Endpoints:
    - GET /: API root with navigation links
    - GET /health: System health check
    - GET /api/settings: Public storefront settings (always 200)
    - GET /payments/upi: UPI payment widget fragment
    - GET /payments/card: card payment widget fragment

Browser requests for unknown pages get the 404 page; unhandled errors
render the error page (HTML) or the standard error envelope (JSON).
"""

import asyncio
import sys
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from starlette.exceptions import HTTPException as StarletteHTTPException

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from pizzabox.core.config import get_settings, setup_logging
from pizzabox.database import get_db, init_db, engine
from pizzabox.schemas import PublicSettings, HealthResponse, ErrorResponse
from pizzabox.services import load_public_settings, masked_failures
from pizzabox.web import router as pages_router, wants_html, render_error, render_not_found

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Storefront API for The Pizza Box: public settings and checkout pages.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=".*",  # any origin, with credentials
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pages_router)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": "Welcome to The Pizza Box API",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify the database and report masked read failures."""

    db_status = "healthy"
    try:
        await db.execute(select(func.now()))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        masked_failures=dict(masked_failures),
        timestamp=datetime.now(),
    )


# =============================================================================
# SETTINGS ENDPOINT
# =============================================================================

@app.get(
    "/api/settings",
    response_model=PublicSettings,
    tags=["Settings"],
    summary="Public Storefront Settings",
)
async def get_public_settings(
    db: AsyncSession = Depends(get_db),
) -> PublicSettings:
    """
    Storefront configuration.

    Always answers 200: when no settings row exists, or the database
    cannot be read, the built-in defaults are returned instead.
    """
    return await load_public_settings(db)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Not-found page for browsers; JSON detail for everything else."""
    if exc.status_code == 404 and wants_html(request):
        return render_not_found(request)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    if wants_html(request):
        return render_error(request)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            detail=str(exc) if settings.debug else "An unexpected error occurred",
        ).model_dump(),
    )


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "pizzabox.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
