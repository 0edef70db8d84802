"""OpenWeatherMap API client for current weather and 3-hourly forecasts.

Free tier: 1000 calls/day, 5-day forecast with 3-hour intervals.
Requests use metric units; wind arrives in m/s and is converted to km/h.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import requests

from src.core.compass import CompassDirection
from src.core.conditions import WeatherSample
from src.core.config import AppConfig
from src.core.errors import ConfigurationMissing, EmptyData, SourceUnavailable
from src.core.units import m_s_to_kmh, round_half_up


logger = logging.getLogger(__name__)

# Gust estimate when the provider omits one
GUST_FACTOR = 1.3


class OpenWeatherMapClient:
    """Client for fetching weather from OpenWeatherMap."""

    NAME = "openweathermap"

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            config: Application config (API settings, route coordinates, time zone)
            session: HTTP session. Defaults to a new requests.Session.
        """
        self.settings = config.openweathermap
        self.coordinates = config.route.coordinates
        self.tz = ZoneInfo(config.forecast.timezone)
        self.session = session or requests.Session()
        self._cache = {}  # Simple in-memory cache

    def _get(self, endpoint: str) -> dict:
        """Fetch an endpoint for the route location, with caching."""
        if not self.settings.api_key:
            raise ConfigurationMissing("OpenWeatherMap API key not configured", source=self.NAME)

        cache_key = f"{endpoint}:{round(self.coordinates.lat, 2)}:{round(self.coordinates.lon, 2)}"

        if cache_key in self._cache:
            cached_time, cached_data = self._cache[cache_key]
            if datetime.now() - cached_time < timedelta(seconds=self.settings.cache_ttl):
                return cached_data

        try:
            response = self.session.get(
                f"{self.settings.base_url}/{endpoint}",
                params={
                    "lat": self.coordinates.lat,
                    "lon": self.coordinates.lon,
                    "appid": self.settings.api_key,
                    "units": "metric",
                },
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise SourceUnavailable(f"OpenWeatherMap API error: {e}", source=self.NAME) from e
        except ValueError as e:
            raise SourceUnavailable(f"OpenWeatherMap returned invalid JSON: {e}", source=self.NAME) from e

        if not isinstance(data, dict):
            raise SourceUnavailable(
                f"OpenWeatherMap returned {type(data).__name__} instead of an object", source=self.NAME
            )

        self._cache[cache_key] = (datetime.now(), data)
        return data

    def parse_entry(self, entry: dict) -> WeatherSample:
        """Convert one OpenWeatherMap observation/forecast entry.

        Args:
            entry: Dict with "wind", "main" and "dt" keys

        Returns:
            WeatherSample in km/h and degrees C

        Raises:
            SourceUnavailable: If the entry is missing fields or has bad values
        """
        try:
            wind = entry.get("wind", {})
            speed = wind.get("speed", 0)
            gust = wind.get("gust")

            if gust is not None:
                gust_kmh = m_s_to_kmh(gust)
            else:
                gust_kmh = int(round_half_up(speed * 3.6 * GUST_FACTOR))

            return WeatherSample(
                wind_speed=m_s_to_kmh(speed),
                wind_direction=CompassDirection.from_degrees(wind.get("deg", 0)),
                gust_speed=gust_kmh,
                temperature=round_half_up(entry.get("main", {}).get("temp", 0)),
                timestamp=datetime.fromtimestamp(entry["dt"], tz=timezone.utc).astimezone(self.tz),
            )
        except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as e:
            raise SourceUnavailable(
                f"Malformed OpenWeatherMap entry ({type(e).__name__}: {e})", source=self.NAME
            ) from e

    def get_current_weather(self) -> WeatherSample:
        """Get current conditions at the route location."""
        data = self._get("weather")
        if "wind" not in data or "dt" not in data:
            raise EmptyData("OpenWeatherMap returned no current observation", source=self.NAME)

        sample = self.parse_entry(data)
        logger.debug(
            f"Current weather: {sample.wind_speed}km/h {sample.wind_direction}, "
            f"gusts {sample.gust_speed}km/h, {sample.temperature}C"
        )
        return sample

    def get_hourly_forecast(self, hours: int = 24) -> list[WeatherSample]:
        """Get forecast samples covering the next `hours` hours.

        Args:
            hours: Hours ahead to cover. Entries are 3-hourly.

        Returns:
            WeatherSample list in time order
        """
        data = self._get("forecast")
        entries = data.get("list")
        if not isinstance(entries, list):
            entries = []
        entries = entries[:math.ceil(hours / 3)]
        if not entries:
            raise EmptyData("OpenWeatherMap returned no forecast entries", source=self.NAME)

        samples = [self.parse_entry(entry) for entry in entries]
        logger.debug(
            f"Forecast: {len(samples)} samples from {samples[0].timestamp:%Y-%m-%d %H:%M} "
            f"to {samples[-1].timestamp:%Y-%m-%d %H:%M}"
        )
        return samples
