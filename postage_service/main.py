"""
FastAPI Application Entry Point

Builds the postage quote service with lifecycle management for the pooled
carrier HTTP clients.

Run: uvicorn postage_service.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from postage_service.core.config import settings
from postage_service.core.errors import register_exception_handlers
from postage_service.core.logging import TRACE_ID, new_trace_id, setup_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "postage_quote_service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Logs provider status on startup and closes carrier clients on shutdown.
    """
    # Startup
    logger.info(f"Postage quote service starting up (env: {settings.APP_ENV}, data dir: {settings.data_dir})")

    from postage_service.providers.base import ProviderConfig
    from postage_service.providers.registry import log_provider_diagnostics
    log_provider_diagnostics(ProviderConfig.from_env())

    yield

    # Shutdown - close all carrier HTTP clients gracefully
    logger.info("Postage quote service shutting down...")

    from postage_service.tools.carrier_http import aclose_all_clients
    await aclose_all_clients()

    logger.info("Postage quote service shutdown complete")


def create_app() -> FastAPI:
    """Assemble the FastAPI application."""
    setup_logging()

    application = FastAPI(
        title="Postage Quote Service",
        description="Multi-carrier parcel quotes with rules-based fallback pricing",
        version=SERVICE_VERSION,
        lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def trace_requests(request: Request, call_next):
        trace_id = request.headers.get("x-request-id") or new_trace_id()
        request.state.trace_id = trace_id
        token = TRACE_ID.set(trace_id)
        try:
            response = await call_next(request)
        finally:
            TRACE_ID.reset(token)
        response.headers["x-request-id"] = trace_id
        return response

    register_exception_handlers(application)

    from postage_service.api.router import api_router
    application.include_router(api_router)

    @application.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "service": SERVICE_NAME,
            "status": "running",
            "version": SERVICE_VERSION
        }

    @application.get("/health")
    async def health():
        """Detailed health check."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "components": {
                "api": "ok",
                "data_dir": str(settings.data_dir),
                "primary_carrier": settings.PRIMARY_CARRIER
            }
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
