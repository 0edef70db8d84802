"""Paddle conditions planner.

Wires the sample sources to the assessment pipeline. This is the main
orchestration layer that connects:
- Weather and tide sources (clients/), tried in order through source chains
- Tide interpolation (tides.py)
- Difficulty scoring and leg arbitration (scorer.py, arbiter.py)
- Hourly/daily aggregation (forecast.py)

Source failures never propagate out of the planner: the chains fall through
to the synthetic generators, and if every tier fails the planner uses the
synthetic weather generator and the neutral tide state.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from src.clients.niwa_tides_client import NIWATidesClient
from src.clients.openweathermap_client import OpenWeatherMapClient
from src.clients.synthetic import SAMPLE_TIDES, SAMPLE_WEATHER, SyntheticTideSource, SyntheticWeatherSource
from src.core.arbiter import DirectionArbiter, PaddleDirectionAssessment
from src.core.conditions import DailyTides, PaddlingConditions, WeatherSample
from src.core.config import AppConfig, load_config
from src.core.errors import EmptyData
from src.core.forecast import DailyForecast, ExtendedForecast, ForecastAggregator
from src.core.scorer import DifficultyScorer
from src.core.sources import SourceChain, SourceStrategy, collect_statuses
from src.core.tides import TideInterpolator


logger = logging.getLogger(__name__)

# Forecast samples this far outside the hourly grid still count for the day
WEATHER_MARGIN = timedelta(hours=3)

FALLBACK_SOURCE = "fallback"


class PaddlePlanner:
    """Current conditions and daily forecasts for the configured route."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        weather_client: Optional[OpenWeatherMapClient] = None,
        tides_client: Optional[NIWATidesClient] = None,
    ):
        """Initialize the planner with optional dependency injection.

        Args:
            config: Application config. Defaults to loading config/paddle.yaml.
            weather_client: OpenWeatherMap client.
            tides_client: NIWA tides client.
        """
        self.config = config or load_config()
        self.route = self.config.route
        self.tz = ZoneInfo(self.config.forecast.timezone)

        self.synthetic_weather = SyntheticWeatherSource(self.tz)
        self.synthetic_tides = SyntheticTideSource(self.tz)

        self.scorer = DifficultyScorer(self.route)
        self.arbiter = DirectionArbiter(self.scorer)
        self.interpolator = TideInterpolator()
        self.aggregator = ForecastAggregator(
            scorer=self.scorer,
            interpolator=self.interpolator,
            start_hour=self.config.forecast.start_hour,
            end_hour=self.config.forecast.end_hour,
            tz=self.tz,
            fallback_weather=self.synthetic_weather.sample_at,
        )

        self.weather = None
        self.tides = None

        current_weather = []
        day_weather = []
        current_tide = []
        day_tides = []

        if not self.config.offline:
            self.weather = weather_client or OpenWeatherMapClient(self.config)
            self.tides = tides_client or NIWATidesClient(self.config)
            current_weather.append(
                SourceStrategy(self.weather.NAME, lambda now: self.weather.get_current_weather())
            )
            day_weather.append(SourceStrategy(self.weather.NAME, self._live_weather_for_day))
            current_tide.append(SourceStrategy(self.tides.NAME, self.tides.get_current_tide))
            day_tides.append(SourceStrategy(self.tides.NAME, self.tides.get_daily_extrema))
        else:
            logger.info("Offline mode: using synthetic sources only")

        current_weather.append(SourceStrategy(self.synthetic_weather.NAME, self.synthetic_weather.get_current_weather))
        day_weather.append(SourceStrategy(self.synthetic_weather.NAME, self._synthetic_weather_for_day))
        current_tide.append(SourceStrategy(self.synthetic_tides.NAME, self.synthetic_tides.get_current_tide))
        day_tides.append(SourceStrategy(self.synthetic_tides.NAME, self.synthetic_tides.get_daily_extrema))

        self.current_weather_chain = SourceChain("current weather", current_weather)
        self.day_weather_chain = SourceChain("hourly weather", day_weather)
        self.current_tide_chain = SourceChain("current tide", current_tide)
        self.day_tides_chain = SourceChain("tide times", day_tides)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def _grid_bounds(self, day: date) -> tuple[datetime, datetime]:
        forecast = self.config.forecast
        return (
            datetime.combine(day, time(forecast.start_hour), tzinfo=self.tz),
            datetime.combine(day, time(forecast.end_hour), tzinfo=self.tz),
        )

    def _live_weather_for_day(self, day: date) -> list[WeatherSample]:
        """Forecast samples from OpenWeatherMap that fall on or near the day's grid."""
        start, end = self._grid_bounds(day)
        hours = math.ceil((end + WEATHER_MARGIN - self.now()).total_seconds() / 3600)
        if hours <= 0:
            raise EmptyData(f"No weather forecast for past date {day}", source=self.weather.NAME)

        samples = self.weather.get_hourly_forecast(hours)
        samples = [s for s in samples if start - WEATHER_MARGIN <= s.timestamp <= end + WEATHER_MARGIN]
        if not samples:
            raise EmptyData(f"Weather forecast does not reach {day}", source=self.weather.NAME)
        return samples

    def _synthetic_weather_for_day(self, day: date) -> list[WeatherSample]:
        forecast = self.config.forecast
        return self.synthetic_weather.get_day_forecast(day, forecast.start_hour, forecast.end_hour)

    def get_current_conditions(self) -> PaddlingConditions:
        """Fetch current weather and tide concurrently.

        Returns:
            PaddlingConditions for now at the route location
        """
        now = self.now()

        with ThreadPoolExecutor(max_workers=2) as executor:
            weather_future = executor.submit(self.current_weather_chain.first_success, now)
            tide_future = executor.submit(self.current_tide_chain.first_success, now)
            weather_outcome = weather_future.result()
            tide_outcome = tide_future.result()

        weather = weather_outcome.value
        if weather is None:
            weather = self.synthetic_weather.sample_at(now)

        tide = tide_outcome.value
        if tide is None:
            tide = self.interpolator.neutral_state(now)

        logger.info(
            f"Current conditions: weather from {weather_outcome.source or FALLBACK_SOURCE}, "
            f"tide from {tide_outcome.source or FALLBACK_SOURCE}"
        )
        return PaddlingConditions(
            weather=weather,
            tide=tide,
            time_of_day=now,
            location=self.route.name,
        )

    def assess(self, conditions: PaddlingConditions) -> PaddleDirectionAssessment:
        """Score both legs of the route for a set of conditions."""
        return self.arbiter.assess(conditions)

    def get_current_conditions_fallback(self, weather_index: int = 0, tide_index: int = 0) -> PaddlingConditions:
        """Static sample conditions for demos and offline checks.

        Args:
            weather_index: Index into the sample weather list (0 if out of range)
            tide_index: Index into the sample tide list (0 if out of range)

        Returns:
            PaddlingConditions at the sample weather's timestamp
        """
        if not 0 <= weather_index < len(SAMPLE_WEATHER):
            weather_index = 0
        if not 0 <= tide_index < len(SAMPLE_TIDES):
            tide_index = 0

        weather = SAMPLE_WEATHER[weather_index]
        return PaddlingConditions(
            weather=weather,
            tide=replace(SAMPLE_TIDES[tide_index]),
            time_of_day=weather.timestamp,
            location=self.route.name,
        )

    def get_daily_forecast(self, day: Optional[date] = None) -> DailyForecast:
        """Build the hourly forecast for a day.

        Args:
            day: Local calendar date. Defaults to today.

        Returns:
            DailyForecast with source statuses and errors recorded
        """
        day = day or self.today()
        logger.info(f"Building forecast for {day}")

        with ThreadPoolExecutor(max_workers=2) as executor:
            weather_future = executor.submit(self.day_weather_chain.first_success, day)
            tides_future = executor.submit(self.day_tides_chain.first_success, day)
            weather_outcome = weather_future.result()
            tides_outcome = tides_future.result()

        samples = weather_outcome.value or []
        tides = tides_outcome.value or DailyTides(date=day, tides=[])

        forecast = self.aggregator.aggregate(day, samples, tides, self.route.name)
        forecast.weather_source = weather_outcome.source or FALLBACK_SOURCE
        forecast.tide_source = tides_outcome.source or FALLBACK_SOURCE
        forecast.source_statuses = collect_statuses([weather_outcome, tides_outcome])
        forecast.errors = weather_outcome.errors + tides_outcome.errors + forecast.errors

        logger.info(
            f"Forecast for {day}: average {forecast.summary.average_difficulty}/10 "
            f"(weather: {forecast.weather_source}, tides: {forecast.tide_source})"
        )
        return forecast

    def get_extended_forecast(self, start: Optional[date] = None) -> ExtendedForecast:
        """Forecasts for a day and the day after.

        Args:
            start: First day. Defaults to today.
        """
        start = start or self.today()
        return ExtendedForecast(
            today=self.get_daily_forecast(start),
            tomorrow=self.get_daily_forecast(start + timedelta(days=1)),
        )


def get_current_conditions(config: Optional[AppConfig] = None) -> PaddlingConditions:
    """Quick access to current conditions."""
    return PaddlePlanner(config).get_current_conditions()


def get_extended_forecast(config: Optional[AppConfig] = None) -> ExtendedForecast:
    """Quick access to today's and tomorrow's forecasts."""
    return PaddlePlanner(config).get_extended_forecast()
