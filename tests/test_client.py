from __future__ import annotations

import httpx
import pytest

from src.core.exceptions import ConfigurationError, ProviderUnavailableError
from src.weather.schemas import ProviderReading

from tests.conftest import ProviderStub, provider_payload


pytestmark = pytest.mark.asyncio


async def test_sends_coordinates_key_and_metric_units(provider: ProviderStub) -> None:
    provider.response = httpx.Response(200, json=provider_payload(temp=11.2, wind=4.0, main="Clouds"))

    result = await provider.client().get_current(-41.2924, 174.7787)

    assert result == ProviderReading(temperature_c=11.2, wind_speed_ms=4.0, condition="Clouds")
    request = provider.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/data/2.5/weather"
    assert request.url.params["lat"] == "-41.2924"
    assert request.url.params["lon"] == "174.7787"
    assert request.url.params["appid"] == "test-key"
    assert request.url.params["units"] == "metric"


@pytest.mark.parametrize("api_key", [None, ""])
async def test_missing_api_key_is_configuration_error(provider: ProviderStub, api_key) -> None:
    with pytest.raises(ConfigurationError):
        await provider.client(api_key=api_key).get_current(0.0, 0.0)

    assert provider.requests == []


@pytest.mark.parametrize("status", [401, 404, 429, 500])
async def test_non_success_status_returns_none(provider: ProviderStub, status: int) -> None:
    provider.response = httpx.Response(status, json={"cod": status, "message": "nope"})

    assert await provider.client().get_current(0.0, 0.0) is None


async def test_transport_error_propagates(provider: ProviderStub) -> None:
    provider.error = httpx.ConnectError("connection refused")

    with pytest.raises(ProviderUnavailableError):
        await provider.client().get_current(0.0, 0.0)


async def test_timeout_propagates(provider: ProviderStub) -> None:
    provider.error = httpx.ReadTimeout("timed out")

    with pytest.raises(ProviderUnavailableError):
        await provider.client().get_current(0.0, 0.0)


async def test_malformed_json_returns_none(provider: ProviderStub) -> None:
    provider.response = httpx.Response(200, text="<html>not json</html>")

    assert await provider.client().get_current(0.0, 0.0) is None


async def test_schema_mismatch_returns_none(provider: ProviderStub) -> None:
    provider.response = httpx.Response(200, json={"main": {"temp": "warm"}})

    assert await provider.client().get_current(0.0, 0.0) is None


async def test_missing_main_returns_none(provider: ProviderStub) -> None:
    provider.response = httpx.Response(200, json={"wind": {"speed": 3.0}, "weather": [{"main": "Rain"}]})

    assert await provider.client().get_current(0.0, 0.0) is None


async def test_optional_fields_default(provider: ProviderStub) -> None:
    provider.response = httpx.Response(200, json={"main": {"temp": 9.0}})

    result = await provider.client().get_current(0.0, 0.0)

    assert result == ProviderReading(temperature_c=9.0, wind_speed_ms=0.0, condition="Clear")


async def test_wind_without_speed_defaults_to_calm(provider: ProviderStub) -> None:
    provider.response = httpx.Response(
        200, json={"main": {"temp": 12.0}, "wind": {"deg": 200}, "weather": [{"main": "Rain"}]}
    )

    result = await provider.client().get_current(0.0, 0.0)

    assert result == ProviderReading(temperature_c=12.0, wind_speed_ms=0.0, condition="Rain")


async def test_weather_entry_without_main_defaults_to_clear(provider: ProviderStub) -> None:
    provider.response = httpx.Response(
        200, json={"main": {"temp": 12.0}, "wind": {"speed": 1.0}, "weather": [{"description": "x"}]}
    )

    result = await provider.client().get_current(0.0, 0.0)

    assert result == ProviderReading(temperature_c=12.0, wind_speed_ms=1.0, condition="Clear")
