from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from weather_edge.api.dependencies import get_weather_service
from weather_edge.common.response import ResponseUtil
from weather_edge.config.settings import settings
from weather_edge.schemas.weather import ErrorResponse, WeatherPayload, WeatherQuery
from weather_edge.services.weather_service import WeatherLookupService

router = APIRouter(tags=["Weather"])


def _first(values: Optional[List[str]]) -> Optional[str]:
    # A repeated query parameter counts with its first value
    return values[0] if values else None


@router.get(
    "/weather",
    response_model=WeatherPayload,
    responses={
        400: {"model": ErrorResponse, "description": "Missing city"},
        404: {"model": ErrorResponse, "description": "City not found"},
        502: {"model": ErrorResponse, "description": "Upstream failure"},
    },
)
async def get_weather(
    city: Optional[List[str]] = Query(None, description="City name", examples=["Paris"]),
    country: Optional[List[str]] = Query(None, description="Country code or name", examples=["FR"]),
    units: Optional[List[str]] = Query(None, description="'metric' (default) or 'imperial'", examples=["metric"]),
    service: WeatherLookupService = Depends(get_weather_service),
):
    """
    Get current weather for a city.

    Geocodes the city with Open-Meteo, then fetches current conditions for
    the first match. `city` is required; a missing or blank value is
    answered with 400 before any upstream call. When a parameter is
    repeated, its first value is used.
    """
    query = WeatherQuery.from_query_params(
        city=_first(city),
        country=_first(country),
        units=_first(units),
    )

    payload = await service.lookup(query)

    return ResponseUtil.success_response(
        data=payload.model_dump(),
        cache_control=settings.weather_cache_control,
    )
