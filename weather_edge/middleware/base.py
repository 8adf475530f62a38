from fastapi import FastAPI

from weather_edge.middleware.cors import CORSPreflightMiddleware
from weather_edge.middleware.logging import CorrelationMiddleware, RequestLoggingMiddleware


def setup_middlewares(app: FastAPI) -> None:
    """
    Register all middleware with the FastAPI application

    Args:
        app: FastAPI application instance
    """
    # Last added = first executed

    # Innermost: preflight short-circuit and CORS headers
    app.add_middleware(CORSPreflightMiddleware)

    # Request timing and logging, sees preflights too
    app.add_middleware(RequestLoggingMiddleware)

    # Outermost: binds the correlation ID before anything logs
    app.add_middleware(CorrelationMiddleware)
