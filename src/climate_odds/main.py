"""
Climate Odds - FastAPI Main Application
=======================================

Historical climate probability service.

Layers:
- infrastructure/: Data sources (synthetic, NASA POWER) and CSV exports
- services/: Sample assembly and query orchestration
- domain/: Pure windowing and aggregation logic
- api/: HTTP interface (routers + schemas)
- core/: Shared utilities (config, logging, exceptions, cache)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
import logging
import uuid

from climate_odds.core.cache import CacheMiddleware
from climate_odds.core.config import settings
from climate_odds.core.logging_config import request_id_context, setup_logging
from climate_odds.dependencies import cleanup_dependencies, get_cache_manager, get_csv_exporter

# Import routers
from climate_odds.api.routers import health_router, climate_router

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    enable_file_logging=settings.LOG_FILE is not None
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management."""
    logger.info(f"🌍 Starting Climate Odds API ({settings!r})")

    removed = get_csv_exporter().cleanup_old_files(settings.EXPORT_MAX_AGE_HOURS)
    if removed:
        logger.info(f"🧹 Removed {removed} expired CSV exports")

    yield

    logger.info("🛑 Shutting down Climate Odds API")
    await cleanup_dependencies()


# Create FastAPI app
app = FastAPI(
    title="Climate Odds API",
    description="Historical probability of weather conditions for any place and day of year",
    version=settings.API_VERSION,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs"
)

# Middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

_cache = get_cache_manager()
if _cache is not None:
    app.middleware("http")(CacheMiddleware(_cache, settings.CACHE_CLEANUP_INTERVAL))


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Propagate X-Request-ID (or a fresh one) into every log record."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    token = request_id_context.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_context.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


# Register routers
app.include_router(health_router)
app.include_router(climate_router)

logger.info("✅ API routers registered")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "climate_odds.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development"
    )
