from typing import Optional
import httpx
from pydantic import ValidationError as PydanticValidationError

from src.core.config_app import settings
from src.core.config_log import logger
from src.core.exceptions import ConfigurationError, ProviderUnavailableError
from src.weather.schemas import ProviderReading, ProviderResponse


class OpenWeatherClient:
    """Client for the OpenWeatherMap current-weather endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str = settings.OPENWEATHER_WEATHER_URL,
        timeout: float = settings.OPENWEATHER_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._http_client = http_client

    async def get_current(self, latitude: float, longitude: float) -> Optional[ProviderReading]:
        """
        Fetches current weather for the coordinates.
        Returns None when the provider answered but gave nothing usable.
        Raises ConfigurationError without an API key and ProviderUnavailableError on transport failure.
        """

        if not self._api_key:
            raise ConfigurationError("OpenWeatherMap API key not configured")

        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self._api_key,
            "units": "metric",
        }

        try:
            if self._http_client is not None:
                response = await self._http_client.get(self._url, params=params, timeout=self._timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(self._url, params=params, timeout=self._timeout)
        except httpx.TransportError as e:
            logger.error(f"OpenWeather API: transport error: {type(e).__name__}: {str(e)[:100]}")
            raise ProviderUnavailableError() from e

        if not response.is_success:
            logger.error(f"OpenWeather API returned {response.status_code}: {response.reason_phrase}")
            return None

        try:
            payload = ProviderResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"OpenWeather API: failed to parse response: {str(e)[:200]}")
            return None

        logger.debug(f"Raw weather data: {payload!r}")

        if payload.main is None:
            logger.error("OpenWeather API: invalid or incomplete weather data received")
            return None

        return ProviderReading.from_response(payload)
