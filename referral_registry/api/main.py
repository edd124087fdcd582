"""Main FastAPI application for the Referral Registry.

This module sets up the FastAPI application with all routes, middleware,
exception handlers and the API documentation endpoints.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from referral_registry import __version__
from referral_registry.api.errors import register_exception_handlers
from referral_registry.api.logging_config import setup_logging
from referral_registry.api.middleware import setup_middleware
from referral_registry.api.openapi_spec import API_TITLE, build_openapi_schema
from referral_registry.api.routes import health, referrals
from referral_registry.infrastructure.config_manager import ServerConfig, get_server_config

logger = logging.getLogger(__name__)

DOCS_URL = "/api-docs"
OPENAPI_URL = "/api-docs/openapi.json"


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """Build the application.

    Parameters:
        config: Server configuration; loaded from the environment when omitted

    Raises:
        ConfigurationError: If the environment holds an invalid setting
    """
    config = config or get_server_config()
    setup_logging(use_json=config.json_logs, log_level=config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        logger.info(f"Server is running on port {config.port}")
        logger.info(f"API documentation available at {DOCS_URL}")
        logger.info(f"Logging level: {config.log_level}")
        yield
        logger.info("Referral Registry API shutting down...")

    app = FastAPI(
        title=API_TITLE,
        description="Create, list and look up medical referrals",
        version=__version__,
        docs_url=DOCS_URL,
        redoc_url=None,
        openapi_url=OPENAPI_URL,
        lifespan=lifespan
    )

    # Published contract comes from openapi_spec, not from the handlers
    app.openapi = build_openapi_schema

    setup_middleware(app, config)
    register_exception_handlers(app)

    app.include_router(referrals.router)
    app.include_router(health.router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint."""
        return {
            "message": "Referral Registry API",
            "version": __version__,
            "docs": DOCS_URL,
            "health": "/api/health"
        }

    return app


app = create_app()
