"""
Academy Admin API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Background job scheduler (daily Google review sync)
- Exception handlers and CORS middleware
- API routing and health check endpoints
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academy.api import api_router
from academy.core.config import settings
from academy.core.database import close_db, init_db
from academy.core.exceptions import NotFoundError, register_exception_handlers
from academy.core.redis import close_redis, init_redis
from academy.core.scheduler import (
    list_registered_jobs,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from academy.modules.testimonials.jobs import register_testimonial_jobs


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of the database, Redis and the
    background job scheduler.
    """
    # Startup
    print(f"Starting Academy Admin API in {settings.python_env} mode...")

    # Redis is optional: rate limiting falls back to process memory
    if await init_redis():
        print("[OK] Redis connected")
    else:
        print("[WARN] Redis unavailable, using in-memory rate limiting")

    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    try:
        register_testimonial_jobs()
        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down Academy Admin API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="Academy Admin API",
    description="Administrative backend for courses, classes, events and family accounts",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration; credentials are required for the session cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to Academy Admin API",
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
# Background Job Debug Endpoints
# ============================================
# Development only. In other environments jobs run on schedule and the
# review sync is exposed to admins at POST /api/v1/testimonials/sync.

if settings.is_development:

    @app.get("/debug/jobs", tags=["Debug"])
    async def list_jobs():
        """List registered background jobs and their next run time."""
        return {"jobs": list_registered_jobs()}

    @app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
    async def trigger_job(job_id: str):
        """
        Run a background job immediately, bypassing its schedule.

        Args:
            job_id: The ID of the job to trigger, e.g.
                ``testimonials_sync_google_reviews``

        Raises:
            NotFoundError: If job_id is not registered
        """
        try:
            return await trigger_job_manually(job_id)
        except KeyError as e:
            raise NotFoundError(f"Job {job_id} not found.", error_code="JOB_NOT_FOUND") from e
