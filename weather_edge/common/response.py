import json
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse, Response

# Sent on every response, success or error
CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class CustomJSONResponse(JSONResponse):
    """Compact UTF-8 JSON; identical content always renders to identical bytes"""
    media_type = "application/json; charset=utf-8"

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            default=lambda o: o.isoformat() if isinstance(o, datetime) else str(o)
        ).encode("utf-8")


class ResponseUtil:
    """Utility class for generating API responses"""

    @staticmethod
    def success_response(
        data: Any,
        status_code: int = status.HTTP_200_OK,
        cache_control: Optional[str] = None,
    ) -> CustomJSONResponse:
        """
        Generate a successful API response

        Args:
            data: Response payload, rendered as the whole body
            status_code: HTTP status code
            cache_control: Optional Cache-Control header value

        Returns:
            CustomJSONResponse carrying the CORS headers
        """
        headers = dict(CORS_HEADERS)
        if cache_control:
            headers["Cache-Control"] = cache_control

        return CustomJSONResponse(
            content=data,
            status_code=status_code,
            headers=headers,
        )

    @staticmethod
    def error_response(
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
        elapsed_ms: Optional[float] = None,
    ) -> CustomJSONResponse:
        """
        Generate an error API response with body {"error": message}

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            headers: Extra headers (e.g. Allow on a 405)
            elapsed_ms: Time taken to process the request in milliseconds

        Returns:
            CustomJSONResponse carrying the CORS headers
        """
        response_headers = dict(headers or {})
        response_headers.update(CORS_HEADERS)

        response = CustomJSONResponse(
            content={"error": message},
            status_code=status_code,
            headers=response_headers,
        )

        if elapsed_ms:
            response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"

        return response

    @staticmethod
    def preflight_response() -> Response:
        """Empty 204 answer to a CORS preflight"""
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=dict(CORS_HEADERS))

    @classmethod
    def server_error(
        cls,
        message: str = "Internal server error.",
        elapsed_ms: Optional[float] = None,
    ) -> CustomJSONResponse:
        return cls.error_response(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            elapsed_ms=elapsed_ms,
        )
