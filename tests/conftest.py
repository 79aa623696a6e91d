from __future__ import annotations

import os
import tempfile

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "weather_api_test_logs"))
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")
os.environ.setdefault("FAULT_INJECTION_EVERY", "5")

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from src.weather.client import OpenWeatherClient
from src.weather.fault_injection import FaultInjector
from src.weather.routes import get_fault_injector, get_weather_client


PROVIDER_URL = "https://provider.test/data/2.5/weather"


def provider_payload(temp: float = 18.0, wind: float = 2.0, main: str = "Clear") -> dict:
    return {
        "coord": {"lon": 174.78, "lat": -41.29},
        "weather": [{"id": 800, "main": main, "description": main.lower(), "icon": "01d"}],
        "main": {"temp": temp, "feels_like": temp - 1, "humidity": 70},
        "wind": {"speed": wind, "deg": 180},
        "name": "Wellington",
    }


class ProviderStub:
    """Records outbound requests and answers with a canned httpx.Response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or httpx.Response(200, json=provider_payload())
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def client(self, api_key: str | None = "test-key") -> OpenWeatherClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self))
        return OpenWeatherClient(api_key=api_key, url=PROVIDER_URL, http_client=http_client)


@pytest.fixture()
def provider() -> ProviderStub:
    return ProviderStub()


@pytest.fixture()
def fault_injector() -> FaultInjector:
    # Disabled unless a test opts in
    return FaultInjector(every=0)


@pytest.fixture()
def app(provider: ProviderStub, fault_injector: FaultInjector):
    application = create_app()
    application.dependency_overrides[get_weather_client] = lambda: provider.client()
    application.dependency_overrides[get_fault_injector] = lambda: fault_injector
    return application


@pytest.fixture()
def api(app):
    with TestClient(app) as client:
        yield client
