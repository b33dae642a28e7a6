"""FastAPI application for the JobTracker API"""

import sys
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import time

from .config import get_settings
from .errors import JobTrackerError, AILimitExceededError, StorageFailureError
from .routers import jobs_router, activities_router, templates_router, ai_router, users_router

# Get settings
settings = get_settings()

# Configure logging based on environment
log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown"""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"AI request limit: {settings.ai_request_limit} per {settings.ai_window_hours}h")

    # Open the database early so schema problems surface at startup
    try:
        from .dependencies import get_db
        db = get_db()
        logger.info(f"Database ready at {db.db_path}")
    except Exception as e:
        logger.warning(f"Database initialization failed: {e}")

    yield

    logger.info(f"Shutting down {settings.app_name} API")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    JobTracker API

    Track job applications and get analytics on your job search.

    ## Features
    - **Jobs**: Create, list, update and delete tracked applications
    - **Analytics**: Status funnel, category performance, weekly velocity and monthly trend
    - **Quick Add**: Save postings straight from the browser extension
    - **AI Assistant**: Resume tailoring, cover letters, interview prep and email replies,
      limited per user per day
    """,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-AI-Remaining-Requests", "Retry-After"],
    max_age=600,
)

# GZip compression for responses > 1KB
app.add_middleware(GZipMiddleware, minimum_size=1000)


# Request timing and logging middleware
@app.middleware("http")
async def request_middleware(request: Request, call_next):
    start_time = time.time()
    request_id = f"{int(start_time * 1000)}"

    if settings.debug:
        logger.debug(f"[{request_id}] {request.method} {request.url.path}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers["X-Request-ID"] = request_id

        # AI completions are slow by nature; only flag the rest
        if process_time > 2.0 and not request.url.path.startswith("/api/v1/ai"):
            logger.warning(
                f"[{request_id}] Slow request: {request.method} {request.url.path} "
                f"took {process_time:.2f}s"
            )

        return response

    except Exception as e:
        logger.error(f"[{request_id}] Request failed: {e}", exc_info=True)
        raise


@app.exception_handler(JobTrackerError)
async def jobtracker_exception_handler(request: Request, exc: JobTrackerError):
    headers = {}
    if isinstance(exc, AILimitExceededError):
        headers["Retry-After"] = str(exc.hours_until_reset * 3600)
        logger.info(f"AI limit reached on {request.url.path}")
    elif isinstance(exc, StorageFailureError):
        logger.error(f"Storage failure: {exc.message} ({exc.original_error})")
    else:
        logger.debug(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "detail": exc.message,
            "path": str(request.url.path),
        },
        headers=headers,
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    detail = str(exc) if settings.debug else "An unexpected error occurred"

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": detail,
            "path": str(request.url.path),
        },
    )


app.include_router(jobs_router)
app.include_router(activities_router)
app.include_router(templates_router)
app.include_router(ai_router)
app.include_router(users_router)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for load balancers and monitoring"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/ready", tags=["health"])
async def readiness_check():
    """Readiness check - returns 200 only when the database answers"""
    try:
        from .dependencies import get_db
        db = get_db()
        users = len(db.list_users())
        return {"status": "ready", "users": users}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": str(e)}
        )


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API info"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
        "ready": "/ready",
    }


# Run with: python -m jobtracker.api.main
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "jobtracker.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level=settings.log_level,
        access_log=settings.debug,
    )
