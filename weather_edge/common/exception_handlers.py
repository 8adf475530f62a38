import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from weather_edge.common.exceptions import BaseAPIException
from weather_edge.common.response import CustomJSONResponse, ResponseUtil
from weather_edge.utils.logger import logger


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def _elapsed_ms(request: Request) -> Optional[float]:
    start_time = getattr(request.state, "start_time", None)
    if start_time:
        return (time.time() - start_time) * 1000
    return None


async def http_exception_handler(request: Request, exc: HTTPException) -> CustomJSONResponse:
    """
    Handle Starlette HTTPExceptions (unknown route, method not allowed)

    Args:
        request: FastAPI request
        exc: HTTPException

    Returns:
        {"error": detail} response
    """
    logger.warning(
        f"HTTP exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        }
    )

    return ResponseUtil.error_response(
        message=str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
        elapsed_ms=_elapsed_ms(request),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> CustomJSONResponse:
    """
    Handle request validation errors as a 400 with the first error message

    Args:
        request: FastAPI request
        exc: RequestValidationError

    Returns:
        {"error": message} response
    """
    errors = exc.errors()

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        extra={
            "validation_errors": [error.get("msg") for error in errors],
            "path": request.url.path,
            "method": request.method,
        }
    )

    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."

    return ResponseUtil.error_response(
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        elapsed_ms=_elapsed_ms(request),
    )


async def api_exception_handler(request: Request, exc: BaseAPIException) -> CustomJSONResponse:
    """
    Handle weather lookup exceptions

    Args:
        request: FastAPI request
        exc: BaseAPIException

    Returns:
        {"error": detail} response with the exception's status code
    """
    cause = exc.__cause__
    logger.warning(
        f"API exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
            "cause": str(cause) if cause else None,
            "path": request.url.path,
            "method": request.method,
        }
    )

    return ResponseUtil.error_response(
        message=str(exc.detail),
        status_code=exc.status_code,
        headers=exc.headers,
        elapsed_ms=_elapsed_ms(request),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> CustomJSONResponse:
    """
    Handle unhandled exceptions

    Args:
        request: FastAPI request
        exc: Unhandled exception

    Returns:
        Generic 500 response; the details only go to the log
    """
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )

    return ResponseUtil.server_error(elapsed_ms=_elapsed_ms(request))
