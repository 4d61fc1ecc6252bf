# app/core/request_logging.py
"""
Request logging middleware for tracking all HTTP requests.
"""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import get_logger

logger = get_logger(__name__)

# Paths logged at DEBUG instead of INFO
QUIET_PATHS = ("/health", "/static/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs all HTTP requests with timing and status codes.

    Adds a unique request ID to each request for tracing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
            error = None
        except Exception as e:
            status_code = 500
            error = str(e)
            raise
        finally:
            duration_ms = (time.time() - start_time) * 1000
            extra = {
                "extra_fields": {
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                }
            }
            message = f"{request.method} {request.url.path} - {status_code} ({duration_ms:.2f}ms)"

            if error:
                logger.error(f"{message} - ERROR: {error}", extra=extra, exc_info=True)
            elif status_code >= 500:
                logger.error(message, extra=extra)
            elif status_code >= 400:
                logger.warning(message, extra=extra)
            elif request.url.path.startswith(QUIET_PATHS):
                logger.debug(message, extra=extra)
            else:
                logger.info(message, extra=extra)

        response.headers["X-Request-ID"] = request_id

        return response
