import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.cache.redis_cache import CacheService
from src.infrastructure.config.settings import get_settings
from src.infrastructure.persistence.database import engine, get_db
from src.presentation.api.dependencies import (get_cache_service,
                                               set_cache_service)
from src.presentation.api.errors import register_exception_handlers
from src.presentation.api.v1.routes import (permissions, places, role_audit,
                                            roles, user_roles)
from src.presentation.middleware import CorrelationIDMiddleware
from src.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    setup_logging()

    # Database schema is managed outside the service (migrations)

    if settings.redis_enabled:
        cache_service = CacheService()
        await cache_service.connect()
        if cache_service.is_available():
            set_cache_service(cache_service)
            logger.info("Redis permission cache initialized")
    else:
        logger.info("Redis cache disabled in configuration")

    yield

    cache = await get_cache_service()
    if cache is not None:
        await cache.disconnect()
        set_cache_service(None)

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Correlation ID for request tracing
app.add_middleware(CorrelationIDMiddleware)

# Security: Using allow_credentials=True requires specific origins (not wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers (audit before roles so /roles/audit is not taken as a role id)
app.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
app.include_router(role_audit.router, prefix="/roles", tags=["role-audit"])
app.include_router(roles.router, prefix="/roles", tags=["roles"])
app.include_router(user_roles.router, prefix="", tags=["user-roles"])
app.include_router(places.router, prefix="/places", tags=["places"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
    - 200 OK if the database answers
    - 503 Service Unavailable otherwise
    """
    cache = await get_cache_service()
    checks: dict = {
        "api": True,
        "database": False,
        "cache": cache.is_available() if cache is not None else None,  # None = not configured
    }
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.error(f"Health check database failure: {e}")
        return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
    return {"status": "healthy", "checks": checks}
