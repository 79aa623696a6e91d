import os
from typing import Optional
from dotenv import find_dotenv, load_dotenv

from .config_log import logger


class Settings:
    """Application settings loaded from environment variables."""

    PROJECT_NAME = "WeatherWear"
    PROJECT_VERSION = "1.0.0"
    PROJECT_DESCRIPTION = "Proxy over OpenWeatherMap that returns a simplified forecast with a clothing recommendation"

    def __init__(self):
        if not load_dotenv(find_dotenv(usecwd=True), override=False):
            logger.info(".env file not found, using process environment and defaults")

        # OpenWeather API
        self.OPENWEATHER_API_KEY: Optional[str] = os.getenv("OPENWEATHER_API_KEY")
        self.OPENWEATHER_BASE_URL: str = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org").rstrip("/")
        self.OPENWEATHER_TIMEOUT: float = float(os.getenv("OPENWEATHER_TIMEOUT", "10.0"))

        # CORS
        self.ALLOWED_ORIGINS: list = [
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,https://localhost:3001").split(",")
            if origin.strip()
        ]

        # Simulated upstream failures, every Nth request (0 disables)
        self.FAULT_INJECTION_EVERY: int = int(os.getenv("FAULT_INJECTION_EVERY", "5"))

        self._validate_settings()

    def _validate_settings(self) -> None:
        """Warns about settings that leave parts of the API unusable."""
        if not self.OPENWEATHER_API_KEY:
            logger.warning("OPENWEATHER_API_KEY is not set. /weather will answer 400 until it is configured.")
        if self.FAULT_INJECTION_EVERY < 0:
            logger.warning("FAULT_INJECTION_EVERY is negative, fault injection disabled")
            self.FAULT_INJECTION_EVERY = 0

    @property
    def OPENWEATHER_WEATHER_URL(self) -> str:
        """Full URL of the current-weather endpoint."""
        return f"{self.OPENWEATHER_BASE_URL}/data/2.5/weather"


settings = Settings()
