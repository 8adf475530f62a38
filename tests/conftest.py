from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from weather_edge.api.dependencies import get_geocoding_client, get_weather_client
from weather_edge.common.api_call import UpstreamClient, create_upstream_client
from weather_edge.config.settings import settings
from weather_edge.main import app

PARIS_GEOCODE = {
    "results": [
        {"name": "Paris", "latitude": 48.86, "longitude": 2.35, "country_code": "FR"}
    ]
}

PARIS_FORECAST = {
    "current_weather": {
        "temperature": 18.2,
        "windspeed": 9.1,
        "weathercode": 1,
        "time": "2024-05-01T12:00",
    }
}


class StubUpstream:
    """
    Canned upstream for httpx.MockTransport

    Records every request it receives and answers each one with a fresh
    response built from the configured status/body, or raises the configured
    exception.
    """

    def __init__(self, json_body: Any = None, status_code: int = 200):
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {}
        self.content: Optional[bytes] = None
        self.error: Optional[Exception] = None

    def respond_with(self, json_body: Any = None, status_code: int = 200, content: Optional[bytes] = None):
        self.json_body = json_body if json_body is not None else {}
        self.status_code = status_code
        self.content = content
        self.error = None

    def fail_with(self, error: Exception):
        self.error = error

    @property
    def called(self) -> bool:
        return bool(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)


def make_client(stub: StubUpstream, base_url: str, vendor: str) -> UpstreamClient:
    return create_upstream_client(base_url, vendor=vendor, transport=httpx.MockTransport(stub))


@pytest.fixture
def geocoding_stub() -> StubUpstream:
    return StubUpstream(PARIS_GEOCODE)


@pytest.fixture
def weather_stub() -> StubUpstream:
    return StubUpstream(PARIS_FORECAST)


@pytest_asyncio.fixture
async def geocoding_client(geocoding_stub: StubUpstream) -> AsyncIterator[UpstreamClient]:
    async with make_client(geocoding_stub, settings.GEOCODING_BASE_URL, "geocoding-stub") as client:
        yield client


@pytest_asyncio.fixture
async def weather_client(weather_stub: StubUpstream) -> AsyncIterator[UpstreamClient]:
    async with make_client(weather_stub, settings.WEATHER_BASE_URL, "forecast-stub") as client:
        yield client


@pytest_asyncio.fixture
async def client(geocoding_stub: StubUpstream, weather_stub: StubUpstream) -> AsyncIterator[AsyncClient]:
    """
    Test client for the app with both upstreams replaced by stubs
    """

    async def override_geocoding_client() -> AsyncIterator[UpstreamClient]:
        async with make_client(geocoding_stub, settings.GEOCODING_BASE_URL, "geocoding-stub") as upstream:
            yield upstream

    async def override_weather_client() -> AsyncIterator[UpstreamClient]:
        async with make_client(weather_stub, settings.WEATHER_BASE_URL, "forecast-stub") as upstream:
            yield upstream

    app.dependency_overrides[get_geocoding_client] = override_geocoding_client
    app.dependency_overrides[get_weather_client] = override_weather_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


def query_params(request: httpx.Request) -> Dict[str, str]:
    return dict(request.url.params)
