import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from weather_edge.common.exceptions import ExternalAPIException
from weather_edge.config.settings import settings
from weather_edge.utils.logger import get_correlation_id, logger


@dataclass
class UpstreamClientConfig:
    """Upstream API client configuration"""
    # Base URL for the API (required)
    base_url: str

    # Vendor name for logging
    vendor: str = "unknown"

    # Default headers to use for all requests
    headers: Dict[str, str] = field(default_factory=dict)

    # Timeout for each request (in seconds)
    timeout: float = 5.0

    follow_redirects: bool = True

    # Replaces the network transport, used to stub upstreams in tests
    transport: Optional[httpx.AsyncBaseTransport] = None


class UpstreamClient:
    """
    HTTP client for one upstream JSON API, with correlation ID propagation and logging

    Every failure (transport error, timeout, non-2xx status, body that is
    not JSON) is raised as ExternalAPIException. Nothing is retried.
    """

    def __init__(self, config: UpstreamClientConfig):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.vendor = config.vendor

        client_kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(config.timeout),
            "follow_redirects": config.follow_redirects,
        }
        if config.transport is not None:
            client_kwargs["transport"] = config.transport

        self._client = httpx.AsyncClient(**client_kwargs)

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make a GET request and decode the JSON body

        Args:
            endpoint: API endpoint path
            params: Query parameters
            headers: Additional headers

        Returns:
            Decoded JSON body

        Raises:
            ExternalAPIException: On any transport, status or decoding failure
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        request_headers = self.config.headers.copy()

        correlation_id = get_correlation_id()
        if correlation_id:
            request_headers[settings.CORRELATION_ID_HEADER] = correlation_id
            request_headers["X-Request-ID"] = correlation_id

        if headers:
            request_headers.update(headers)

        start_time = time.time()

        logger.info(
            f"Outgoing GET request to {self.vendor}",
            extra={
                "event_type": "external_api_request_start",
                "vendor": self.vendor,
                "url": url,
                "query_params": params or {},
                "headers": self._sanitize_headers(request_headers),
            }
        )

        try:
            response = await self._client.get(url, params=params, headers=request_headers)
        except httpx.RequestError as e:
            self._log_failure(url, start_time, e)
            raise ExternalAPIException(
                f"Request to {self.vendor} failed: {type(e).__name__}",
                service_name=self.vendor,
            ) from e

        execution_time_ms = round((time.time() - start_time) * 1000, 2)

        if not response.is_success:
            logger.warning(
                f"{self.vendor} responded with {response.status_code}",
                extra={
                    "event_type": "external_api_bad_status",
                    "vendor": self.vendor,
                    "url": url,
                    "status_code": response.status_code,
                    "execution_time_ms": execution_time_ms,
                }
            )
            raise ExternalAPIException(
                f"{self.vendor} responded with {response.status_code}",
                service_name=self.vendor,
                upstream_status=response.status_code,
            )

        try:
            response_data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self._log_failure(url, start_time, e)
            raise ExternalAPIException(
                f"{self.vendor} returned a body that is not JSON",
                service_name=self.vendor,
                upstream_status=response.status_code,
            ) from e

        logger.info(
            f"Received response from {self.vendor} - {response.status_code}",
            extra={
                "event_type": "external_api_request_complete",
                "vendor": self.vendor,
                "url": url,
                "status_code": response.status_code,
                "execution_time_ms": execution_time_ms,
            }
        )

        return response_data

    def _log_failure(self, url: str, start_time: float, error: Exception) -> None:
        logger.warning(
            f"Request to {self.vendor} failed: {error}",
            extra={
                "event_type": "external_api_request_error",
                "vendor": self.vendor,
                "url": url,
                "execution_time_ms": round((time.time() - start_time) * 1000, 2),
                "error_type": type(error).__name__,
            }
        )

    def _sanitize_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Sanitize headers for logging"""

        sensitive_headers = {
            'authorization', 'x-api-key', 'api-key', 'token', 'cookie'
        }

        return {
            key: "***REDACTED***" if key.lower() in sensitive_headers else value
            for key, value in headers.items()
        }

    async def close(self):
        """Close the HTTP client"""
        await self._client.aclose()

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def create_upstream_client(
    base_url: str,
    vendor: str = "unknown",
    timeout: Optional[float] = None,
    **kwargs
) -> UpstreamClient:
    """
    Create an upstream API client

    Args:
        base_url: Base URL for the API
        vendor: Vendor/service name used in logs
        timeout: Request timeout in seconds, defaults to UPSTREAM_TIMEOUT_SECONDS
        **kwargs: Additional UpstreamClientConfig options

    Returns:
        UpstreamClient instance
    """
    config = UpstreamClientConfig(
        base_url=base_url,
        vendor=vendor,
        timeout=timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS,
        **kwargs
    )
    return UpstreamClient(config)
