# app/main.py
"""
FastAPI application entry point.
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import SCHEDULE_END, SCHEDULE_START, TIMEZONE, TODAY_MODE, TODAY_MODES
from app.core.logging_config import get_logger, setup_logging
from app.core.request_logging import RequestLoggingMiddleware
from app.core.sentry_config import init_sentry
from app.database.database import create_tables, get_db
from app.routes.api import router as api_router
from app.routes.calendar import router as calendar_router
from app.routes.export import router as export_router

# Setup logging FIRST (before any other imports that might log)
setup_logging()
logger = get_logger(__name__)

# Initialize Sentry for error tracking (production only)
sentry_enabled = init_sentry()

VERSION = "0.1.0"
STATIC_DIR = Path(__file__).resolve().parent / "static"


def validate_settings():
    """
    Validate environment-driven settings before serving requests.

    Raises:
        RuntimeError: If the schedule window or today mode is invalid
    """
    if SCHEDULE_START > SCHEDULE_END:
        raise RuntimeError(f"Schedule window is empty: {SCHEDULE_START} is after {SCHEDULE_END}")

    if TODAY_MODE not in TODAY_MODES:
        raise RuntimeError(f"Invalid SHIFT_PLANNER_TODAY_MODE {TODAY_MODE!r}, expected one of {TODAY_MODES}")

    logger.info(f"Schedule window {SCHEDULE_START} to {SCHEDULE_END} ({TIMEZONE}, today mode {TODAY_MODE})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Application starting up",
        extra={
            "extra_fields": {
                "production": os.getenv("PRODUCTION", "false").lower() == "true",
                "python_version": sys.version,
            }
        },
    )

    try:
        validate_settings()
    except Exception as e:
        logger.error(f"Settings validation failed: {e}", exc_info=True)
        raise

    # Create database tables
    try:
        create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)
        raise

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title="Shift Planner",
    description="Personal shift-rotation calendar with notes, holidays and exports",
    version=VERSION,
    lifespan=lifespan,
)

# CORS Configuration
IS_PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"
CORS_ORIGINS = (
    [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]
    if os.getenv("CORS_ORIGINS")
    else []
)

if IS_PRODUCTION:
    # Production: Strict CORS - only allow specified origins
    if not CORS_ORIGINS:
        logger.warning(
            "Production mode but no CORS_ORIGINS set. CORS will block all cross-origin requests. "
            "Set CORS_ORIGINS environment variable if you need to allow specific origins."
        )

    allowed_origins = CORS_ORIGINS
    allowed_methods = ["GET", "POST", "PUT", "DELETE"]
    logger.info(f"CORS configured for production with origins: {allowed_origins}")
else:
    # Development: Permissive CORS for easier testing
    allowed_origins = ["*"]
    allowed_methods = ["*"]
    logger.info("CORS configured for development (permissive)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=allowed_methods,
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],  # Expose our request ID header
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Mount static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Include routers
app.include_router(calendar_router)
app.include_router(api_router)
app.include_router(export_router)


@app.get("/health", tags=["health"])
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns 200 OK if the database answers, 503 Service Unavailable otherwise.
    """
    try:
        db.execute(text("SELECT 1"))
        return JSONResponse(
            status_code=200,
            content={
                "status": "healthy",
                "service": "shift-planner",
                "version": VERSION,
                "database": "connected",
            },
        )
    except Exception as e:
        logger.error(f"Health check failed - database connection error: {e}", exc_info=True)
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "service": "shift-planner",
                "database": "disconnected",
                "error": "Database connection failed",
            },
        ) from e
