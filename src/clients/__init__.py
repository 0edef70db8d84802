"""Weather and tide sample sources."""

from src.clients.niwa_tides_client import NIWATidesClient
from src.clients.openweathermap_client import OpenWeatherMapClient
from src.clients.synthetic import (
    SAMPLE_TIDES,
    SAMPLE_WEATHER,
    SyntheticTideSource,
    SyntheticWeatherSource,
)

__all__ = [
    "NIWATidesClient",
    "OpenWeatherMapClient",
    "SAMPLE_TIDES",
    "SAMPLE_WEATHER",
    "SyntheticTideSource",
    "SyntheticWeatherSource",
]
