"""Growth OS — FastAPI Application Entry Point.

Restaurant marketing dashboard backend: ad platform data, search insights,
and the reconciled marketing funnel.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from growthos.config import settings
from growthos.database import (
    backend_name,
    db_url,
    init_db,
    mask_url,
    test_connection,
    verify_schema,
)
from growthos.scheduler.jobs import start_scheduler, stop_scheduler
from growthos.api.meta_routes import router as meta_router
from growthos.api.google_ads_routes import router as google_ads_router
from growthos.api.search_console_routes import router as search_console_router
from growthos.api.business_profile_routes import router as business_profile_router
from growthos.api.analytics_routes import router as analytics_router
from growthos.api.funnel_routes import router as funnel_router
from growthos.api.metrics_routes import router as metrics_router
from growthos.api.client_routes import router as client_router
from growthos.connectors.base import credentials_present
from growthos.core.errors import ValidationError
from growthos.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 Growth OS starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
            verify_schema()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — funnel saves will be cached locally")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("Growth OS shut down")


app = FastAPI(
    title="Growth OS",
    description="Restaurant marketing analytics — Meta, Google Ads, Search Console, Business Profile and GA4 data with a reconciled marketing funnel.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected request: {exc.message}", extra={"endpoint": request.url.path})
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": ValidationError.code, "message": message},
    )


# Routers
app.include_router(meta_router)
app.include_router(google_ads_router)
app.include_router(search_console_router)
app.include_router(business_profile_router)
app.include_router(analytics_router)
app.include_router(funnel_router)
app.include_router(metrics_router)
app.include_router(client_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "growthos",
        "version": "1.0.0",
    }


@app.get("/debug/db", tags=["System"])
async def debug_db():
    """Debug endpoint — check database connectivity."""
    return {
        "connected": test_connection(),
        "backend": backend_name(db_url),
        "url": mask_url(db_url),
        "environment": "serverless" if IS_SERVERLESS else "local",
    }


@app.get("/debug/config", tags=["System"])
async def debug_config():
    """Which integrations have credentials; never the values themselves."""
    sc_id, sc_secret, sc_refresh = settings.search_console_credentials
    ga_id, ga_secret, ga_refresh = settings.analytics_credentials
    return {
        "meta": credentials_present(settings.meta_access_token, settings.meta_app_id),
        "google_ads": credentials_present(
            settings.google_ads_client_id,
            settings.google_ads_client_secret,
            settings.google_ads_refresh_token,
            settings.google_ads_developer_token,
        ),
        "search_console": credentials_present(sc_id, sc_secret, sc_refresh),
        "business_profile": credentials_present(
            settings.google_business_profile_client_id,
            settings.google_business_profile_client_secret,
            settings.google_business_profile_refresh_token,
        ),
        "google_analytics": credentials_present(ga_id, ga_secret, ga_refresh),
        "scheduler_enabled": settings.scheduler_enabled,
        "meta_api_version": settings.meta_api_version,
        "google_ads_api_version": settings.google_ads_api_version,
    }
