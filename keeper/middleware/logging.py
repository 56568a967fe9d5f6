"""
Request logging middleware.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from keeper.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every inbound request with a request id and its duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-GitHub-Delivery") or uuid.uuid4().hex
        request_logger = logger.with_context(request_id=request_id)
        start_time = time.monotonic()

        try:
            response = await call_next(request)
        except Exception as e:
            log_api_call(
                request_logger,
                service="inbound",
                endpoint=request.url.path,
                method=request.method,
                duration_ms=(time.monotonic() - start_time) * 1000,
                error=str(e),
            )
            raise

        log_api_call(
            request_logger,
            service="inbound",
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            duration_ms=(time.monotonic() - start_time) * 1000,
        )
        response.headers["X-Request-ID"] = request_id
        return response
