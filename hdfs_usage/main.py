"""
Main FastAPI application entry point.

Sets up the FastAPI app with:
- CORS middleware
- Loguru logging
- Health check endpoints
- HDFS usage stats router backed by the usage table store
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from hdfs_usage.common.responses import HealthResponse
from hdfs_usage.config.deployment_validation import log_deployment_configuration
from hdfs_usage.config.logger import setup_logging
from hdfs_usage.config.settings import settings
from hdfs_usage.db_kv.store import SqliteKVStore
from hdfs_usage.features.hdfs_stats.router import router as hdfs_stats_router
from hdfs_usage.features.hdfs_stats.service import StatsQueryService

APP_NAME = "HDFS Usage Stats"
APP_VERSION = "0.1.0"

# Set up logging before anything else
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Opens the usage table store (creating it if missing), builds the stats
    service from settings, and checkpoints the store on shutdown.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {APP_NAME}")
    logger.info(f"FastAPI Server: http://0.0.0.0:{settings.port}")
    logger.info("=" * 60)

    store = SqliteKVStore.open(settings.store.db_path_resolved)
    app.state.stats_service = StatsQueryService(
        store,
        default_scan_batch_size=settings.store.default_scan_batch_size,
    )

    log_deployment_configuration()

    yield

    logger.info("Shutting down application")
    app.state.stats_service = None
    store.checkpoint_wal()
    store.close_all()


app = FastAPI(
    title=APP_NAME,
    description="Hourly HDFS usage statistics by cluster and path",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(hdfs_stats_router, prefix="/api/v1", tags=["hdfs"])


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health() -> HealthResponse:
    """Detailed health check endpoint."""
    logger.debug("Health endpoint called")
    return HealthResponse(status="ok", version=APP_VERSION, app_name=APP_NAME)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "app": APP_NAME,
        "version": APP_VERSION,
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    reload = settings.env == "development"

    uvicorn.run(
        "hdfs_usage.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=reload,
        log_config=None,  # Disable uvicorn logging (we use loguru)
    )
