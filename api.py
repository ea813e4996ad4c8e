"""
FitTrack FastAPI Application

Main entry point for the FitTrack API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB
from common.utils import register_exception_handlers, success_response

# App-specific imports
from fittrack import __version__
from fittrack.config import settings

# Import routers
from fittrack.routers import (
    auth_router,
    users_router,
    workouts_router,
    measurements_router,
    admin_router,
)

# Import service initialization
from fittrack.dependencies import get_account_service, init_all_services

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info("Starting FitTrack API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )

    init_all_services(db=main_db.db, settings=settings)
    await get_account_service().ensure_indexes()
    logger.info("All services initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down FitTrack API...")
    await main_db.disconnect()


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="FitTrack API",
    description="Fitness tracking: accounts, workouts, measurements, and analytics",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Error Envelope
# =============================================================================
register_exception_handlers(app)

# =============================================================================
# Include Routers (all under /api/v1 prefix)
# =============================================================================
API_PREFIX = "/api/v1"

app.include_router(auth_router, prefix=API_PREFIX, tags=["Authentication"])
app.include_router(users_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(workouts_router, prefix=API_PREFIX, tags=["Workouts"])
app.include_router(measurements_router, prefix=API_PREFIX, tags=["Measurements"])
app.include_router(admin_router, prefix=API_PREFIX, tags=["Admin"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Reports the API version and whether MongoDB answers a ping.
    """
    return success_response({
        "status": "ok",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "database": "connected" if await main_db.ping() else "disconnected",
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
