from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

TemperatureUnit = Literal["celsius", "fahrenheit"]
WindSpeedUnit = Literal["kmh", "mph"]

# Upstream numbers keep their JSON type, so 52 is echoed as 52 and not 52.0
Number = Union[int, float]


class WeatherQuery(BaseModel):
    """Normalized query parameters of a weather lookup"""
    city: str = Field("", description="City name, trimmed")
    country: Optional[str] = Field(None, description="Country code or name, trimmed")
    units: str = Field("metric", description="'metric' or 'imperial', lower-cased")

    @classmethod
    def from_query_params(
        cls,
        city: Optional[str] = None,
        country: Optional[str] = None,
        units: Optional[str] = None,
    ) -> "WeatherQuery":
        """
        Build a query from raw query-string values

        City and country are trimmed, an empty country is dropped and units
        are lower-cased (but not trimmed). Nothing is rejected here; an empty
        city is reported by the lookup service.
        """
        return cls(
            city=(city or "").strip(),
            country=(country or "").strip() or None,
            units=(units or "metric").lower(),
        )

    @property
    def is_imperial(self) -> bool:
        return self.units == "imperial"

    @property
    def temperature_unit(self) -> TemperatureUnit:
        return "fahrenheit" if self.is_imperial else "celsius"

    @property
    def wind_speed_unit(self) -> WindSpeedUnit:
        return "mph" if self.is_imperial else "kmh"


# Upstream payloads. Unknown keys are ignored.

class GeocodeLocation(BaseModel):
    """One match returned by the geocoding search"""
    name: str
    latitude: Number
    longitude: Number
    country_code: Optional[str] = None


class GeocodeSearchResponse(BaseModel):
    results: Optional[List[GeocodeLocation]] = None

    def first_match(self) -> Optional[GeocodeLocation]:
        return self.results[0] if self.results else None


class CurrentWeather(BaseModel):
    """Current conditions block of a forecast response"""
    temperature: Number
    windspeed: Number
    weathercode: int
    time: str = Field(..., description="Observation time, ISO-8601 as sent upstream")


class ForecastResponse(BaseModel):
    current_weather: Optional[CurrentWeather] = None


# Client-facing payloads

class Coordinates(BaseModel):
    lat: Number
    lon: Number


class WeatherPayload(BaseModel):
    """Weather response returned to clients"""
    city: str = Field(..., description="City name as resolved by geocoding")
    country: Optional[str] = Field(None, description="Resolved country code")
    coordinates: Coordinates
    temperature: Number
    temperatureUnit: TemperatureUnit  # noqa: N815
    windSpeed: Number  # noqa: N815
    windSpeedUnit: WindSpeedUnit  # noqa: N815
    weatherCode: int  # noqa: N815
    observedAt: str  # noqa: N815
    source: str = Field("open-meteo", description="Upstream data provider")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "city": "Paris",
                    "country": "FR",
                    "coordinates": {"lat": 48.86, "lon": 2.35},
                    "temperature": 18.2,
                    "temperatureUnit": "celsius",
                    "windSpeed": 9.1,
                    "windSpeedUnit": "kmh",
                    "weatherCode": 1,
                    "observedAt": "2024-05-01T12:00",
                    "source": "open-meteo"
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable error message")
