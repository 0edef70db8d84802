"""NIWA tide API client for tide predictions.

Provides high/low tide times and regularly sampled tide heights for the
route location. Heights are relative to mean sea level (datum MSL).

Without an interval parameter the API returns only the high/low events;
with interval=10 it returns a 10-minute height series.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd
import requests

from src.core.conditions import DailyTides, TideState
from src.core.config import AppConfig
from src.core.errors import ConfigurationMissing, EmptyData, SourceUnavailable
from src.core.tides import classify_extrema, tide_state_from_series


logger = logging.getLogger(__name__)

# Minutes between samples for the current-tide series
CURRENT_TIDE_INTERVAL = 10


class NIWATidesClient:
    """Client for fetching tide data from the NIWA tide API."""

    NAME = "niwa"

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        """Initialize the NIWA tides client.

        Args:
            config: Application config (API settings, route coordinates, time zone)
            session: HTTP session. Defaults to a new requests.Session.
        """
        self.settings = config.niwa
        self.coordinates = config.route.coordinates
        self.tz = ZoneInfo(config.forecast.timezone)
        self.session = session or requests.Session()
        self._cache = {}  # Simple in-memory cache

    def _fetch_data(self, params: dict) -> list:
        """Fetch tide values from the NIWA API."""
        if not self.settings.api_key:
            raise ConfigurationMissing("NIWA API key not configured", source=self.NAME)

        cache_key = tuple(sorted(params.items()))
        if cache_key in self._cache:
            cached_time, cached_values = self._cache[cache_key]
            if datetime.now() - cached_time < timedelta(seconds=self.settings.cache_ttl):
                return cached_values

        try:
            response = self.session.get(
                f"{self.settings.base_url}/data",
                params=params,
                headers={"Accept": "application/json", "x-apikey": self.settings.api_key},
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise SourceUnavailable(f"Failed to fetch tide data: {e}", source=self.NAME) from e
        except ValueError as e:
            raise SourceUnavailable(f"NIWA returned invalid JSON: {e}", source=self.NAME) from e

        if not isinstance(data, dict):
            raise SourceUnavailable(f"NIWA returned {type(data).__name__} instead of an object", source=self.NAME)

        values = data.get("values") or []
        if not isinstance(values, list):
            raise SourceUnavailable("NIWA response values are not a list", source=self.NAME)
        if not values:
            raise EmptyData("No tide data available", source=self.NAME)

        self._cache[cache_key] = (datetime.now(), values)
        return values

    def get_tide_series(
        self,
        start_date: date,
        days: int = 1,
        interval: Optional[int] = None,
    ) -> pd.DataFrame:
        """Get tide heights for a date range.

        Args:
            start_date: First date (UTC) to request
            days: Number of days to request
            interval: Minutes between samples. None for high/low events only.

        Returns:
            DataFrame with columns: time (local, tz-aware), height_m
        """
        params = {
            "lat": self.coordinates.lat,
            "long": self.coordinates.lon,
            "startDate": start_date.strftime("%Y-%m-%d"),
            "numberOfDays": days,
            "datum": self.settings.datum,
        }
        if interval is not None:
            params["interval"] = interval

        values = self._fetch_data(params)

        try:
            df = pd.DataFrame(
                [{"time": v.get("time"), "height_m": v.get("value")} for v in values]
            )
            df["time"] = pd.to_datetime(df["time"], utc=True).dt.tz_convert(self.tz)
            df["height_m"] = pd.to_numeric(df["height_m"], errors="coerce")
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(
                f"Malformed NIWA tide values ({type(e).__name__}: {e})", source=self.NAME
            ) from e
        df = df.dropna().sort_values("time").reset_index(drop=True)

        if df.empty:
            raise EmptyData("No usable tide values in response", source=self.NAME)

        return df

    def get_daily_extrema(self, day: date) -> DailyTides:
        """Get the high/low tides for a local calendar date.

        The request spans the previous UTC day as well, so that the whole
        local day is covered in time zones ahead of UTC.

        Args:
            day: Local calendar date

        Returns:
            DailyTides with the events falling on that date
        """
        df = self.get_tide_series(day - timedelta(days=1), days=2)

        extrema = classify_extrema(
            [(ts.to_pydatetime(), height) for ts, height in zip(df["time"], df["height_m"])]
        )
        tides = [t for t in extrema if t.time.date() == day]
        if not tides:
            raise EmptyData(f"No tide events on {day}", source=self.NAME)

        for tide in tides:
            logger.debug(f"NIWA tide: {tide.time:%H:%M} {tide.height}m {tide.type.value}")

        return DailyTides(date=day, tides=tides)

    def get_current_tide(self, now: Optional[datetime] = None) -> TideState:
        """Get the tide state now from a 10-minute series.

        Args:
            now: Instant to describe. Defaults to the current time.

        Returns:
            TideState at the sample nearest to now
        """
        now = now or datetime.now(self.tz)
        utc_today = now.astimezone(ZoneInfo("UTC")).date()
        df = self.get_tide_series(utc_today, days=2, interval=CURRENT_TIDE_INTERVAL)

        # First sample at or after now
        upcoming = df.index[df["time"] >= pd.Timestamp(now)]
        index = int(upcoming[0]) if len(upcoming) else len(df) - 1

        series = [(ts.to_pydatetime(), height) for ts, height in zip(df["time"], df["height_m"])]
        state = tide_state_from_series(series, index)
        logger.debug(f"Current tide: {state.height}m {state.type.value} {state.direction.value}")
        return state
