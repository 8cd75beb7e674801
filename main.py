"""
CSV Order Splitter — Main Application

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import settings

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: Report configuration problems
    Shutdown: Log
    """
    logger.info(
        "application_starting",
        environment=settings.environment,
        store_domain=settings.shopify_store_domain or None,
        api_version=settings.shopify_api_version,
        verify_webhooks=settings.verify_webhooks,
    )

    if not settings.shopify_configured:
        logger.warning("shopify_not_configured")

    if settings.verify_webhooks and not settings.shopify_webhook_secret:
        logger.error("webhook_secret_missing", effect="all webhooks will be rejected")
    elif not settings.verify_webhooks:
        logger.warning("webhook_verification_disabled")

    yield

    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title="CSV Order Splitter",
    description="CSV export and CSV-driven Shopify order splitting",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===================
# ROUTES
# ===================

@app.get("/health", response_class=PlainTextResponse)
async def health_check():
    """Liveness probe. No dependency checks."""
    return "OK"


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Static status string."""
    return "✅ CSV generator + live Shopify order data is running!"


# ===================
# ERROR HANDLERS
# ===================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Catches unhandled exceptions and returns standard error format.
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if settings.debug else None,
                "timestamp": datetime.utcnow().isoformat()
            }
        }
    )


# ===================
# INCLUDE ROUTERS
# ===================
from routes.csv_export import router as csv_export_router
from routes.webhooks import router as webhooks_router

app.include_router(csv_export_router)
app.include_router(webhooks_router)


if __name__ == "__main__":
    from server import run
    run()
