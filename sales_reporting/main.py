"""
FastAPI Production Application

Main entry point for the Sales Performance Reporting API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from sales_reporting.config import get_settings
from sales_reporting.config.logging import configure_logging
from sales_reporting.database.connection import init_database, close_database
from sales_reporting.serving.api.middleware import RequestLoggingMiddleware
from sales_reporting.serving.api.routes import health_router, reports_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Sales Performance Reporting API", environment=settings.app_env)

    try:
        await init_database()
    except Exception as e:
        logger.warning("Database init failed", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_database()


app = FastAPI(
    title="Sales Performance Reporting API",
    description="Read-only sales aggregation reports over the retail order schema",
    version=settings.version,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Compression
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(RequestLoggingMiddleware)

# API routes
app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Sales Performance Reporting API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
