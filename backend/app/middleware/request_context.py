"""
Request Context Middleware
==========================

Starlette middleware that:
- Assigns a request id (reusing an incoming X-Request-ID header)
- Binds it to the logging context
- Logs every completed request with its status and duration
- Adds X-Request-ID and X-Process-Time response headers
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger, request_id_context

# Initialize logger
logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id and access logging for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_context.set(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise
        else:
            process_time = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                query=request.url.query or None,
                status_code=response.status_code,
                duration_ms=round(process_time * 1000, 2),
            )
            return response
        finally:
            request_id_context.reset(token)
