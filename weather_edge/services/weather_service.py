from pydantic import ValidationError

from weather_edge.common.api_call import UpstreamClient
from weather_edge.common.exceptions import (
    CityNotFoundException,
    ExternalAPIException,
    GeocodingFailedException,
    MissingCityException,
    NoCurrentWeatherException,
    WeatherFetchFailedException,
)
from weather_edge.config.settings import settings
from weather_edge.schemas.weather import (
    Coordinates,
    ForecastResponse,
    GeocodeLocation,
    GeocodeSearchResponse,
    WeatherPayload,
    WeatherQuery,
)
from weather_edge.utils.logger import logger


class WeatherLookupService:
    """
    Resolves a city to its current weather using two upstream APIs

    The geocoding call and the forecast call are awaited strictly in order;
    the forecast needs the coordinates from the first call. Each failure
    raises the matching BaseAPIException subclass and ends the lookup.
    """

    def __init__(self, geocoding_client: UpstreamClient, weather_client: UpstreamClient):
        self.geocoding_client = geocoding_client
        self.weather_client = weather_client

    async def lookup(self, query: WeatherQuery) -> WeatherPayload:
        """
        Run the full lookup for a normalized query

        Args:
            query: Normalized query parameters

        Returns:
            WeatherPayload ready to be serialized

        Raises:
            MissingCityException: city is empty
            GeocodingFailedException: geocoding call failed
            CityNotFoundException: geocoding found no match
            WeatherFetchFailedException: forecast call failed
            NoCurrentWeatherException: forecast had no current conditions
        """
        if not query.city:
            raise MissingCityException()

        location = await self.geocode(query)

        forecast = await self.fetch_current_weather(location, query)
        current = forecast.current_weather

        logger.info(
            f"Resolved weather for {location.name}",
            extra={
                "event_type": "weather_lookup_complete",
                "city": location.name,
                "weather_code": current.weathercode,
            }
        )

        return WeatherPayload(
            city=location.name,
            country=location.country_code or query.country or None,
            coordinates=Coordinates(lat=location.latitude, lon=location.longitude),
            temperature=current.temperature,
            temperatureUnit=query.temperature_unit,
            windSpeed=current.windspeed,
            windSpeedUnit=query.wind_speed_unit,
            weatherCode=current.weathercode,
            observedAt=current.time,
            source=settings.DATA_SOURCE,
        )

    async def geocode(self, query: WeatherQuery) -> GeocodeLocation:
        """Return the first geocoding match for the query's city"""
        params = {"name": query.city, "count": 1}
        if query.country:
            params["country"] = query.country

        try:
            data = await self.geocoding_client.get(
                "/v1/search",
                params=params,
                headers={"Cache-Control": "no-store"},
            )
            result = GeocodeSearchResponse.model_validate(data)
        except ExternalAPIException as e:
            raise GeocodingFailedException() from e
        except ValidationError as e:
            logger.warning(
                "Geocoding response did not match the expected shape",
                extra={"event_type": "geocoding_invalid_payload", "error_count": e.error_count()}
            )
            raise GeocodingFailedException() from e

        location = result.first_match()
        if location is None:
            logger.info(
                f"No geocoding match for '{query.city}'",
                extra={"event_type": "geocoding_no_match", "country": query.country}
            )
            raise CityNotFoundException()

        return location

    async def fetch_current_weather(
        self,
        location: GeocodeLocation,
        query: WeatherQuery,
    ) -> ForecastResponse:
        """Fetch current conditions at the location, in the query's units"""
        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "current_weather": "true",
            "temperature_unit": query.temperature_unit,
            "wind_speed_unit": query.wind_speed_unit,
        }
        headers = {
            "User-Agent": settings.UPSTREAM_USER_AGENT,
            "Cache-Control": f"max-age={settings.WEATHER_EDGE_MAX_AGE}",
        }

        try:
            data = await self.weather_client.get("/v1/forecast", params=params, headers=headers)
            forecast = ForecastResponse.model_validate(data)
        except ExternalAPIException as e:
            raise WeatherFetchFailedException() from e
        except ValidationError as e:
            logger.warning(
                "Forecast response did not match the expected shape",
                extra={"event_type": "forecast_invalid_payload", "error_count": e.error_count()}
            )
            # An unusable current_weather block means there are no current conditions
            if any(err["loc"][:1] == ("current_weather",) for err in e.errors()):
                raise NoCurrentWeatherException() from e
            raise WeatherFetchFailedException() from e

        if forecast.current_weather is None:
            raise NoCurrentWeatherException()

        return forecast
