# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from .api import editing_router, health_router, notes_router, versions_router
from .config import get_settings
from .core.exceptions import CollabNotesError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.services import LockSweeper
from .database import AsyncSessionLocal, create_tables, dispose_engine

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting CollabNotes application",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except RedisError as e:
        logger.warning(
            "Redis connection failed, token revocation checks disabled",
            extra={"error": str(e)},
        )

    # Tests run against their own in-memory database
    skip_db = os.getenv("COLLABNOTES_SKIP_LIFESPAN_DB") == "1"
    sweeper = None
    if skip_db:
        logger.info("Skipping DB setup due to COLLABNOTES_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

        if settings.lock_sweep_enabled:
            sweeper = LockSweeper(AsyncSessionLocal, settings.lock_sweep_interval_seconds)
            await sweeper.start()

    yield

    logger.info("Shutting down CollabNotes application")
    if sweeper is not None:
        await sweeper.stop()
    await redis_client.disconnect()
    if not skip_db:
        await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Lock-based collaborative note editing with version history",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.exception_handler(CollabNotesError)
async def collabnotes_error_handler(request: Request, exc: CollabNotesError) -> JSONResponse:
    """Map domain errors onto their HTTP status with an ErrorResponse body."""
    if exc.status_code >= 500:
        logger.error(
            exc.message,
            extra={"error_type": exc.error_type, "path": request.url.path},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(notes_router, prefix="/api")
app.include_router(editing_router, prefix="/api")
app.include_router(versions_router, prefix="/api")
app.include_router(health_router, prefix="/api")


# Root endpoint
@app.get("/")
async def root():
    return {"message": "CollabNotes API"}


@app.get("/api/")
async def api_root():
    return {
        "message": "CollabNotes API",
        "version": settings.app_version,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
        "endpoints": {
            "notes": "/api/notes/",
            "health": "/api/health/",
        },
    }


# Basic unprefixed health endpoint for load balancers
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("collabnotes.main:app", host=settings.host, port=settings.port, reload=settings.reload)
