"""Rehaish - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rehaish.core.config import get_settings
from rehaish.core.database import check_database, engine, get_db
from rehaish.core.env_validation import validate_environment
from rehaish.core.errors import register_exception_handlers
from rehaish.routers import (
    auth_router,
    profiles_router,
    properties_router,
    applications_router,
    leases_router,
    payments_router,
    favorites_router,
)

# CRITICAL: Validate environment before proceeding
# This will hard-fail (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"[APP] {settings.app_name} starting ({settings.environment.value})")
    yield
    await engine.dispose()
    logger.info(f"[APP] {settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="Rental marketplace API: property listings, applications, leases and payment records.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

register_exception_handlers(app)

# CORS - configured from ALLOWED_ORIGINS
# In production, wildcard (*) is blocked by env_validation.py
logger.info(f"[APP] CORS configured with origins: {settings.cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(profiles_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(applications_router, prefix=settings.api_v1_prefix)
app.include_router(leases_router, prefix=settings.api_v1_prefix)
app.include_router(payments_router, prefix=settings.api_v1_prefix)
app.include_router(favorites_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint with a database round-trip."""
    database_ok = await check_database(db)
    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "service": settings.app_name,
        "database": "connected" if database_ok else "disconnected",
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
