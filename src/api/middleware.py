"""Middleware configuration for the validation API.

This module sets up middleware for request logging and error handling.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse

from src.domain.ports import InvalidDocumentError

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    Request context is attached to the log records (``extra=``) so the JSON
    formatter emits it as separate fields.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response with X-Process-Time header
        """
        start_time = time.time()
        context = {
            "method": request.method,
            "endpoint": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        logger.info(f"{request.method} {request.url.path}", extra=context)

        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"

        logger.info(
            f"{request.method} {request.url.path} - Status: {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round(process_time * 1000, 2),
            }
        )

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for global error handling."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle errors globally.

        Only document errors are the client's fault. Anything else, including
        a pydantic ValidationError raised while building results, is a 500.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response with error details if exception occurred
        """
        try:
            return await call_next(request)
        except InvalidDocumentError as e:
            logger.warning(f"Invalid document: {str(e)}")
            return JSONResponse(
                status_code=400,
                content={"error": "Bad Request", "detail": str(e)}
            )
        except Exception as e:
            logger.error(f"Unexpected error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "detail": "An unexpected error occurred. Please check logs for details."
                }
            )


def setup_middleware(app) -> None:
    """Setup application middleware.

    Parameters:
        app: FastAPI application instance

    Middleware Order (important):
        1. ErrorHandlingMiddleware - Handles errors
        2. LoggingMiddleware - Logs requests/responses
    """
    # Error handling (before logging to catch errors)
    app.add_middleware(ErrorHandlingMiddleware)

    # Logging (last, to log everything including errors)
    app.add_middleware(LoggingMiddleware)
