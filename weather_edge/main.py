from contextlib import asynccontextmanager

from fastapi import FastAPI

from weather_edge.common.exception_handlers import register_exception_handlers
from weather_edge.common.response import CustomJSONResponse
from weather_edge.config.settings import settings
from weather_edge.middleware.base import setup_middlewares
from weather_edge.routes import register_routes
from weather_edge.utils.logger import logger


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(
        "Weather Edge starting up",
        extra={"event_type": "app_startup", "env": settings.ENV, "version": settings.VERSION}
    )
    yield
    logger.info("Weather Edge shutting down", extra={"event_type": "app_shutdown"})


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application
    """
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        default_response_class=CustomJSONResponse,
        lifespan=lifespan,
    )

    setup_middlewares(application)

    register_exception_handlers(application)

    register_routes(application)

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("weather_edge.main:app", host="0.0.0.0", port=8000, reload=True)
