from typing import List
from fastapi import APIRouter, Depends, Query, Request

from src.core.config_app import settings
from src.core.config_log import logger
from src.core.exceptions import (
    InternalServerError,
    ServiceUnavailableError,
    ValidationError,
    WeatherApiException,
)
from src.weather.client import OpenWeatherClient
from src.weather.fault_injection import FaultInjector
from src.weather.forecast import to_forecast
from src.weather.schemas import ErrorResponse, Forecast, PresetLocation

weather_router = APIRouter()

PRESET_LOCATIONS = [
    PresetLocation(name="Wellington CBD", latitude=-41.2924, longitude=174.7787),
    PresetLocation(name="Auckland", latitude=-36.8485, longitude=174.7633),
    PresetLocation(name="Christchurch", latitude=-43.5321, longitude=172.6362),
    PresetLocation(name="London", latitude=51.5074, longitude=-0.1278),
]


def get_fault_injector(request: Request) -> FaultInjector:
    """The process-wide fault injector created in the app lifespan."""
    return request.app.state.fault_injector


def get_weather_client(request: Request) -> OpenWeatherClient:
    """Provider client bound to the app's shared HTTP client, if one is running."""
    return OpenWeatherClient(
        api_key=settings.OPENWEATHER_API_KEY,
        http_client=getattr(request.app.state, "http_client", None),
    )


def validate_coordinates(lat: float, lon: float) -> None:
    # Written as negated ranges so NaN is rejected too
    if not -90 <= lat <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= lon <= 180:
        raise ValidationError("Longitude must be between -180 and 180")


@weather_router.get(
    "",
    response_model=Forecast,
    responses={
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        500: {"description": "Problem details"},
    },
)
async def get_weather(
    lat: float = Query(..., description="Latitude in degrees, -90 to 90"),
    lon: float = Query(..., description="Longitude in degrees, -180 to 180"),
    fault_injector: FaultInjector = Depends(get_fault_injector),
    client: OpenWeatherClient = Depends(get_weather_client),
):
    """Current weather for the coordinates, simplified, with a clothing recommendation."""

    request_number = fault_injector.next_request()
    if fault_injector.should_fail(request_number):
        logger.warning(f"Simulating upstream failure for request #{request_number}")
        raise ServiceUnavailableError()

    try:
        validate_coordinates(lat, lon)

        reading = await client.get_current(lat, lon)
        if reading is None:
            raise InternalServerError("Failed to retrieve weather data")

        return to_forecast(reading)
    except WeatherApiException:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error while getting weather for ({lat}, {lon}): {e}")
        raise InternalServerError() from e


@weather_router.get("/locations", response_model=List[PresetLocation])
async def get_locations():
    """Preset locations offered by the front-end."""
    return PRESET_LOCATIONS
