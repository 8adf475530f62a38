import time
import uuid
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from weather_edge.config.settings import settings
from weather_edge.utils.logger import generate_correlation_id, logger, set_correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Middleware for correlation ID generation and propagation
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.correlation_header = settings.CORRELATION_ID_HEADER
        self.enable_correlation = settings.ENABLE_CORRELATION_ID

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Generate or extract correlation ID and set it in context"""

        correlation_id = None

        if self.enable_correlation:
            correlation_id = self._get_correlation_id_from_request(request) or generate_correlation_id()

            set_correlation_id(correlation_id)
            request.state.correlation_id = correlation_id

        response = await call_next(request)

        if correlation_id:
            response.headers[self.correlation_header] = correlation_id

        return response

    def _get_correlation_id_from_request(self, request: Request) -> Optional[str]:
        """Extract correlation ID from request headers"""

        possible_headers = [
            self.correlation_header,
            "X-Request-ID",
            "X-Trace-ID",
        ]

        for header in possible_headers:
            value = request.headers.get(header)
            if value:
                return value

        return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests and responses
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """
        Process the request, log timing info, and handle errors
        """
        correlation_id = getattr(request.state, "correlation_id", None)
        request_id = correlation_id or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        request.state.start_time = start_time

        method = request.method
        path = request.url.path

        logger.set_context(request_id=request_id)

        logger.info(
            f"Request started: {method} {path}",
            extra={
                "event_type": "request_start",
                "method": method,
                "path": path,
                "query_params": dict(request.query_params),
                "client_host": request.client.host if request.client else None,
                "user_agent": request.headers.get("User-Agent", ""),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time_ms = round((time.time() - start_time) * 1000, 2)

            logger.error(
                f"Request failed: {method} {path}",
                exc_info=True,
                extra={
                    "event_type": "request_error",
                    "method": method,
                    "path": path,
                    "process_time_ms": process_time_ms,
                    "error": str(e),
                },
            )
            logger.clear_context()

            # Re-raise the exception to be handled by the exception handlers
            raise

        process_time_ms = round((time.time() - start_time) * 1000, 2)

        logger.info(
            f"Request completed: {method} {path} - {response.status_code}",
            extra={
                "event_type": "request_complete",
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": process_time_ms,
            },
        )

        response.headers["X-Request-ID"] = request_id
        if "X-Response-Time" not in response.headers:
            response.headers["X-Response-Time"] = f"{process_time_ms}ms"

        logger.clear_context()

        return response
