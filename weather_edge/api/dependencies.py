from typing import AsyncIterator

from fastapi import Depends

from weather_edge.common.api_call import UpstreamClient, create_upstream_client
from weather_edge.config.settings import settings
from weather_edge.services.weather_service import WeatherLookupService


async def get_geocoding_client() -> AsyncIterator[UpstreamClient]:
    """
    Provide a geocoding client scoped to the current request

    The client is closed once the response has been sent; no connection
    outlives the request.
    """
    async with create_upstream_client(settings.GEOCODING_BASE_URL, vendor="open-meteo-geocoding") as client:
        yield client


async def get_weather_client() -> AsyncIterator[UpstreamClient]:
    """Provide a forecast client scoped to the current request"""
    async with create_upstream_client(settings.WEATHER_BASE_URL, vendor="open-meteo-forecast") as client:
        yield client


async def get_weather_service(
    geocoding_client: UpstreamClient = Depends(get_geocoding_client),
    weather_client: UpstreamClient = Depends(get_weather_client),
) -> WeatherLookupService:
    return WeatherLookupService(geocoding_client, weather_client)
