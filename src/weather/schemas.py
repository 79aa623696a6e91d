from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TEMPERATURE_C = 20.0
DEFAULT_WIND_SPEED_MS = 0.0
DEFAULT_CONDITION = "Clear"


class MainData(BaseModel):
    temp: float


class WindData(BaseModel):
    speed: Optional[float] = None


class WeatherDescription(BaseModel):
    main: Optional[str] = None
    description: Optional[str] = None


class ProviderResponse(BaseModel):
    """Subset of the OpenWeatherMap current-weather payload that the service reads."""

    model_config = ConfigDict(extra="ignore")

    main: Optional[MainData] = None
    wind: Optional[WindData] = None
    weather: Optional[List[WeatherDescription]] = None


class ProviderReading(BaseModel):
    """Provider values with defaults applied. Only built at the parse boundary."""

    temperature_c: float
    wind_speed_ms: float
    condition: str

    @classmethod
    def from_response(cls, response: ProviderResponse) -> "ProviderReading":
        temperature = response.main.temp if response.main is not None else DEFAULT_TEMPERATURE_C
        wind_speed = DEFAULT_WIND_SPEED_MS
        if response.wind is not None and response.wind.speed is not None:
            wind_speed = response.wind.speed
        condition = DEFAULT_CONDITION
        if response.weather and response.weather[0].main:
            condition = response.weather[0].main
        return cls(temperature_c=temperature, wind_speed_ms=wind_speed, condition=condition)


class Forecast(BaseModel):
    """Simplified forecast returned to the front-end."""

    temperature: float = Field(..., description="Temperature in °C, one decimal")
    windSpeed: float = Field(..., description="Wind speed in km/h, one decimal")
    condition: str = Field(..., description="One of Sunny, Rainy, Snowing, Windy")
    recommendation: str


class PresetLocation(BaseModel):
    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ErrorResponse(BaseModel):
    error: str
