from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """
    Base exception class for all API exceptions

    Subclasses pin a status code and a client-facing message. The exception
    handlers render `detail` as the `error` field of the response body.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error."
    headers: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        actual_detail = detail if detail is not None else self.detail
        actual_headers = headers if headers is not None else self.headers

        super().__init__(
            status_code=self.status_code,
            detail=actual_detail,
            headers=actual_headers
        )


class BadRequestException(BaseAPIException):
    """Exception for general bad request errors"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Bad request."


class NotFoundException(BaseAPIException):
    """Exception raised when resource is not found"""
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found."


class ExternalAPIException(BaseAPIException):
    """Exception for external API call failures"""
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "External API call failed."

    def __init__(
        self,
        detail: Optional[str] = None,
        service_name: Optional[str] = None,
        upstream_status: Optional[int] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize with external API call details

        Args:
            detail: Error message
            service_name: Name of the external service
            upstream_status: HTTP status returned by the external service, if any
            headers: Additional response headers
        """
        self.service_name = service_name
        self.upstream_status = upstream_status

        super().__init__(detail=detail, headers=headers)


# Weather lookup failures, one per exit of the pipeline

class MissingCityException(BadRequestException):
    detail = "Missing required query param 'city'."


class CityNotFoundException(NotFoundException):
    detail = "City not found."


class GeocodingFailedException(ExternalAPIException):
    detail = "Geocoding failed."


class WeatherFetchFailedException(ExternalAPIException):
    detail = "Weather fetch failed."


class NoCurrentWeatherException(ExternalAPIException):
    detail = "No current weather data."
