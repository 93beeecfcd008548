"""
HR Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Background job scheduler (daily offer expiration sweep)
- CORS middleware
- Error handlers
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from hr_portal.api import api_router
from hr_portal.core import redis as redis_module
from hr_portal.core.config import settings
from hr_portal.core.database import async_session_maker, close_db, init_db
from hr_portal.core.errors import InternalError, PortalError
from hr_portal.core.redis import close_redis, init_redis
from hr_portal.core.scheduler import start_scheduler, stop_scheduler
from hr_portal.modules.audit.service import log_action
from hr_portal.modules.offers.jobs import register_offer_jobs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection
    - Database connection
    - Background job scheduler
    """
    # Startup
    print(f"Starting HR Portal API in {settings.python_env} mode...")

    # Initialize Redis (rate limiting falls back to in-process state without it)
    try:
        await init_redis()
        print("[OK] Redis connected")
    except Exception as e:
        print(f"[FAIL] Redis connection failed: {e}")
        redis_module.redis_client = None
        if settings.is_production:
            raise

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Background Job Scheduler
    try:
        # Register jobs before starting the scheduler
        register_offer_jobs()

        # Start the scheduler
        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down HR Portal API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="HR job and tender offers, applications and archives",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.api_prefix)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Error handlers
# ============================================


def _error_body(error_code: str, message: str) -> dict:
    return {"detail": {"error": error_code, "message": message}}


@app.exception_handler(PortalError)
async def portal_error_handler(_request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error_code, exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VALIDATION_ERROR", "; ".join(messages) or "Invalid request."),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    try:
        async with async_session_maker() as db:
            await log_action(db, f"Error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    except Exception as audit_error:
        logger.error(f"Could not record error in audit log: {audit_error}")

    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=_error_body(error.error_code, error.message))


# ============================================
# Health endpoints
# ============================================


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to HR Portal API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


# ============================================
# Debug Endpoints (development only)
# ============================================
# These endpoints allow manual triggering of background jobs for testing
# and debugging purposes. In production, jobs run automatically on schedule.

if settings.is_development:

    @app.get("/debug/db", tags=["Debug"])
    async def debug_db():
        """Test database connection."""
        try:
            async with async_session_maker() as session:
                result = await session.execute(text("SELECT 1"))
                return {"database": "connected", "result": result.scalar()}
        except Exception as e:
            logger.error(f"Debug database check failed: {e}")
            return {"database": "error", "message": "Database connection failed."}

    @app.get("/debug/jobs", tags=["Debug"])
    async def list_jobs():
        """
        List all registered background jobs and their status.

        Returns:
            List of job information including next run time and pause status.
        """
        from hr_portal.core.scheduler import list_registered_jobs

        return {"jobs": list_registered_jobs()}

    @app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
    async def trigger_job(job_id: str):
        """
        Manually trigger a background job for testing.

        Args:
            job_id: The ID of the job to trigger. Available jobs:
                - offers_expiration_sweep

        Returns:
            Job execution result, including the sweep report.

        Raises:
            HTTPException 400: If job_id is not found.
        """
        from hr_portal.core.scheduler import trigger_job_manually

        try:
            return await trigger_job_manually(job_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @app.post("/debug/jobs/{job_id}/pause", tags=["Debug"])
    async def pause_job_endpoint(job_id: str):
        """Pause a scheduled background job. Use /debug/jobs/{job_id}/resume to restart it."""
        from hr_portal.core.scheduler import pause_job

        return {"job_id": job_id, "paused": pause_job(job_id)}

    @app.post("/debug/jobs/{job_id}/resume", tags=["Debug"])
    async def resume_job_endpoint(job_id: str):
        """Resume a paused background job."""
        from hr_portal.core.scheduler import resume_job

        return {"job_id": job_id, "resumed": resume_job(job_id)}
