"""Middleware configuration for the referral API.

This module sets up middleware for request logging, error handling and CORS.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from referral_registry.infrastructure.config_manager import ServerConfig

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response with X-Process-Time and X-Request-ID headers
        """
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        client_ip = request.client.host if request.client else "unknown"
        context = {"request_id": request_id, "client_ip": client_ip, "endpoint": request.url.path}

        logger.info(f"{request.method} {request.url.path} - Client: {client_ip}", extra=context)

        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers["X-Request-ID"] = request_id

        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s",
            extra={**context, "status_code": response.status_code}
        )

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns unexpected exceptions into a generic 500 response.

    Known errors (missing referral, invalid input) are handled by the
    exception handlers in ``referral_registry.api.errors`` before they get here.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unexpected error on {request.method} {request.url.path}: {str(e)}",
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "detail": "An unexpected error occurred. Please check logs for details."
                }
            )


def setup_middleware(app: FastAPI, config: ServerConfig) -> None:
    """Setup application middleware.

    Parameters:
        app: FastAPI application instance
        config: Server configuration (CORS origins)

    Middleware Order (outermost first):
        1. CORSMiddleware - Answers preflight requests, adds CORS headers
        2. LoggingMiddleware - Logs requests/responses, including 500s
        3. ErrorHandlingMiddleware - Converts unexpected errors to 500
    """
    # Added last-to-first: Starlette wraps each new middleware around the previous ones
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    allow_all = "*" in config.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else config.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Process-Time", "X-Request-ID"],
    )
