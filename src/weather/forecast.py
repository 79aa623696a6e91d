"""Mapping from provider readings to the forecast shown to the user.

Everything here is pure: no I/O, no logging, no defaults. Missing provider
fields are filled in by ``ProviderReading.from_response`` before these
functions are called.
"""
from typing import List

from src.weather.schemas import Forecast, ProviderReading


MS_TO_KMH = 3.6

WINDY_THRESHOLD_KMH = 25
BREEZY_THRESHOLD_KMH = 15
LOCAL_WIND_THRESHOLD_KMH = 20

COLD_THRESHOLD_C = 15
HOT_THRESHOLD_C = 25

WET_CONDITIONS = {"Rain", "Drizzle", "Thunderstorm"}
LOCAL_WET_CONDITIONS = {"Rain", "Drizzle"}

LOCAL_REMARK = "(typical Wellington weather!)"


def map_condition(condition: str, wind_speed_kmh: float) -> str:
    """Maps an OpenWeatherMap `weather.main` keyword to a condition label."""

    # Strong wind wins over whatever the sky is doing
    if wind_speed_kmh > WINDY_THRESHOLD_KMH:
        return "Windy"

    if condition == "Clear":
        return "Sunny"
    if condition in WET_CONDITIONS:
        return "Rainy"
    if condition == "Snow":
        return "Snowing"
    # Clouds and anything unrecognised
    return "Windy" if wind_speed_kmh > BREEZY_THRESHOLD_KMH else "Sunny"


def build_recommendation(temperature_c: float, wind_speed_kmh: float, condition: str) -> str:
    """Assembles the clothing sentence from temperature, wind, condition and local clauses."""

    clauses: List[str] = []

    if temperature_c < COLD_THRESHOLD_C:
        clauses.append("don't forget to bring a coat")
    elif temperature_c > HOT_THRESHOLD_C:
        clauses.append("it's a great day for a swim")
    else:
        clauses.append("light clothing")

    if wind_speed_kmh > WINDY_THRESHOLD_KMH:
        clauses.append("windproof outer layer")
    elif wind_speed_kmh > BREEZY_THRESHOLD_KMH:
        clauses.append("wind-resistant jacket")

    if condition in WET_CONDITIONS:
        clauses.append("don't forget the umbrella")
    elif condition == "Snow":
        clauses.append("waterproof boots and warm hat")

    if wind_speed_kmh > LOCAL_WIND_THRESHOLD_KMH or condition in LOCAL_WET_CONDITIONS:
        clauses.append(LOCAL_REMARK)

    return f"Wear {', '.join(clauses)}."


def to_forecast(reading: ProviderReading) -> Forecast:
    wind_speed_kmh = reading.wind_speed_ms * MS_TO_KMH
    return Forecast(
        temperature=round(reading.temperature_c, 1),
        windSpeed=round(wind_speed_kmh, 1),
        condition=map_condition(reading.condition, wind_speed_kmh),
        recommendation=build_recommendation(reading.temperature_c, wind_speed_kmh, reading.condition),
    )
