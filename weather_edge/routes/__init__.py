from fastapi import FastAPI

from weather_edge.api.health import router as health_router
from weather_edge.api.weather import router as weather_router
from weather_edge.config.settings import settings


def register_routes(app: FastAPI) -> None:
    """
    Register all API routes with the FastAPI application

    Args:
        app: FastAPI application instance
    """
    app.include_router(health_router, prefix=settings.API_PREFIX)
    app.include_router(weather_router, prefix=settings.API_PREFIX)
