from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from weather_edge.common.response import CORS_HEADERS, ResponseUtil
from weather_edge.utils.logger import logger


class CORSPreflightMiddleware(BaseHTTPMiddleware):
    """
    Answers every OPTIONS request with an empty 204 and stamps CORS headers on all responses

    Unlike Starlette's CORSMiddleware, the preflight answer does not depend
    on Origin or Access-Control-Request-Method being present, and the allow
    headers are sent whether or not the request came from a browser.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            logger.debug(
                f"Preflight answered for {request.url.path}",
                extra={"event_type": "cors_preflight"}
            )
            return ResponseUtil.preflight_response()

        response = await call_next(request)

        for header, value in CORS_HEADERS.items():
            response.headers.setdefault(header, value)

        return response
