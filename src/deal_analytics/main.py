"""
Deal SLA Analytics - Main Application
=====================================

SLA metrics and grouped dashboard analytics for CRM deal pipelines.

Modules:
- Deal SLA: first communication, follow-up and price sharing timeliness
- Analytics: deals grouped by stage, department, rejection reason,
  comment classification, source and country

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, value objects and pure calculators
- Infrastructure: YAML configuration
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from deal_analytics.config import settings
from deal_analytics.core import ApplicationException

# SLA configuration
from deal_analytics.sla.infrastructure import get_config_provider

# Module Routers
from deal_analytics.sla.interfaces import sla_router
from deal_analytics.analytics.interfaces import analytics_router

# Middleware
from deal_analytics.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)

# Logging
from deal_analytics.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Load SLA configuration (fails fast on an invalid file)
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment, settings.app_name)
    logger.info("Starting Deal SLA Analytics", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    provider = get_config_provider()
    config = provider.get_config()
    logger.info("SLA configuration loaded", extra={
        "path": str(provider.path),
        "initial_response_policy": config.initial_response_policy,
        "thresholds_hours": config.thresholds_hours
    })

    app.state.settings = settings

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Deal SLA Analytics shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Deal SLA Analytics API",
    description="""
    ## Deal pipeline SLA metrics and dashboard analytics

    Stateless computations over a CRM snapshot supplied in the request body.

    ---

    ### SLA Module

    **Endpoints:**
    - `POST /sla/metrics` - First communication, follow-up and price sharing metrics

    **Default thresholds (hours):**

    | Metric | Threshold | Phase |
    |--------|-----------|-------|
    | First Communication | 1 | creation to first move out of the initial stage |
    | Follow-up | 24 | dwell in "Follow up in 24 Hours" |
    | Price Sharing | 24 | dwell in "Offer Finalization for Patient" |

    ---

    ### Analytics Module

    **Endpoints:**
    - `POST /analytics/dashboard` - KPI header, grouped rows and SLA metrics
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
# Added last runs first: correlation ID must be set before request logging.
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(sla_router)
app.include_router(analytics_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {"sla_config": "loaded"}
                }
            }
        }
    }
})
async def health_check():
    """Health check endpoint for load balancers and orchestrators."""
    provider = get_config_provider()
    checks = {
        "sla_config": "loaded" if provider.path.exists() else "defaults",
    }
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "sla": {
                "prefix": "/sla",
                "endpoints": ["POST /sla/metrics - Compute deal SLA metrics"]
            },
            "analytics": {
                "prefix": "/analytics",
                "endpoints": ["POST /analytics/dashboard - Build the deal dashboard"]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "deal_analytics.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
