"""Hourly and daily paddling forecasts.

Runs the tide interpolator, the scorer (both legs) and the arbiter over an
hourly grid for one calendar date, then summarises the day:
- best/worst time: first hour with the highest/lowest score
- average difficulty: mean score rounded to 0.1
- conditions: compares counts of easy and moderate hours
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional, Sequence

from src.core.arbiter import DirectionArbiter, PaddleDirectionAssessment
from src.core.conditions import DailyTides, PaddlingConditions, TideExtremum, TideState, WeatherSample
from src.core.scorer import DifficultyAssessment, DifficultyLevel, DifficultyScorer
from src.core.sources import SourceStatus
from src.core.tides import TideInterpolator
from src.core.units import round_half_up


logger = logging.getLogger(__name__)

CONDITIONS_GOOD = "Generally good conditions throughout the day"
CONDITIONS_MIXED = "Mixed conditions - timing will be important"
CONDITIONS_CHALLENGING = "Challenging conditions expected"

# An hour is labelled with a tide event this close to it
TIDE_INDICATOR_WINDOW = timedelta(minutes=30)


@dataclass
class HourlyForecast:
    """Conditions and assessments for one hour."""
    time: datetime
    weather: WeatherSample
    tide: TideState
    difficulty: DifficultyAssessment
    paddle_directions: PaddleDirectionAssessment


@dataclass
class DailySummary:
    """Day-level summary of the hourly forecasts."""
    best_time: datetime
    worst_time: datetime
    average_difficulty: float
    conditions: str


@dataclass
class DailyForecast:
    """Forecast for a single day."""
    date: date
    hourly_forecasts: list[HourlyForecast]
    summary: DailySummary
    tides: Optional[DailyTides] = None
    location: str = ""

    # Where the samples came from
    weather_source: Optional[str] = None
    tide_source: Optional[str] = None
    source_statuses: list[SourceStatus] = field(default_factory=list)

    # Errors during generation
    errors: list[str] = field(default_factory=list)

    @property
    def best_hour(self) -> HourlyForecast:
        return next(h for h in self.hourly_forecasts if h.time == self.summary.best_time)

    @property
    def worst_hour(self) -> HourlyForecast:
        return next(h for h in self.hourly_forecasts if h.time == self.summary.worst_time)

    @property
    def easy_hours(self) -> int:
        return sum(1 for h in self.hourly_forecasts if h.difficulty.level is DifficultyLevel.EASY)

    def window(self, start_hour: int, end_hour: int) -> list[HourlyForecast]:
        """Hourly forecasts between two hours (inclusive)."""
        return [h for h in self.hourly_forecasts if start_hour <= h.time.hour <= end_hour]


@dataclass
class ExtendedForecast:
    """Today and tomorrow."""
    today: DailyForecast
    tomorrow: DailyForecast

    @property
    def days(self) -> list[DailyForecast]:
        return [self.today, self.tomorrow]


def summarize_day(hourly: Sequence[HourlyForecast]) -> DailySummary:
    """Build the day summary from hourly forecasts.

    Args:
        hourly: Hourly forecasts in time order (at least one)

    Returns:
        DailySummary
    """
    if not hourly:
        raise ValueError("Cannot summarise a day without hourly forecasts")

    best = hourly[0]
    worst = hourly[0]
    for forecast in hourly[1:]:
        if forecast.difficulty.score > best.difficulty.score:
            best = forecast
        if forecast.difficulty.score < worst.difficulty.score:
            worst = forecast

    average = sum(h.difficulty.score for h in hourly) / len(hourly)

    easy_hours = sum(1 for h in hourly if h.difficulty.level is DifficultyLevel.EASY)
    moderate_hours = sum(1 for h in hourly if h.difficulty.level is DifficultyLevel.MODERATE)

    if easy_hours > moderate_hours:
        conditions = CONDITIONS_GOOD
    elif moderate_hours > easy_hours:
        conditions = CONDITIONS_MIXED
    else:
        conditions = CONDITIONS_CHALLENGING

    return DailySummary(
        best_time=best.time,
        worst_time=worst.time,
        average_difficulty=round_half_up(average, 1),
        conditions=conditions,
    )


def nearest_weather(when: datetime, samples: Sequence[WeatherSample]) -> Optional[WeatherSample]:
    """The sample closest in time to `when` (earliest on ties)."""
    if not samples:
        return None
    return min(samples, key=lambda s: abs((s.timestamp - when).total_seconds()))


def tide_time_indicator(when: datetime, tides: Optional[DailyTides]) -> Optional[TideExtremum]:
    """The tide event within half an hour of `when`, if any."""
    if tides is None:
        return None
    for tide in tides.tides:
        if abs(tide.time - when) <= TIDE_INDICATOR_WINDOW:
            return tide
    return None


class ForecastAggregator:
    """Builds hourly grids and daily summaries."""

    DEFAULT_START_HOUR = 6
    DEFAULT_END_HOUR = 22

    def __init__(
        self,
        scorer: Optional[DifficultyScorer] = None,
        interpolator: Optional[TideInterpolator] = None,
        start_hour: int = DEFAULT_START_HOUR,
        end_hour: int = DEFAULT_END_HOUR,
        tz: Optional[tzinfo] = None,
        fallback_weather: Optional[Callable[[datetime], WeatherSample]] = None,
    ):
        """Initialize the aggregator.

        Args:
            scorer: Difficulty scorer. Defaults to the Ian Shaw Park route.
            interpolator: Tide interpolator.
            start_hour: First hour of the grid (inclusive).
            end_hour: Last hour of the grid (inclusive).
            tz: Time zone for grid instants. None gives naive datetimes.
            fallback_weather: Weather for an hour when no samples exist.
        """
        self.scorer = scorer or DifficultyScorer()
        self.arbiter = DirectionArbiter(self.scorer)
        self.interpolator = interpolator or TideInterpolator()
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.tz = tz
        self.fallback_weather = fallback_weather

    def hourly_grid(self, day: date) -> list[datetime]:
        """Instants on the hour from start_hour to end_hour."""
        return [
            datetime.combine(day, time(hour), tzinfo=self.tz)
            for hour in range(self.start_hour, self.end_hour + 1)
        ]

    def weather_at(self, when: datetime, samples: Sequence[WeatherSample]) -> WeatherSample:
        """Weather for an hour: nearest sample, else the fallback generator."""
        weather = nearest_weather(when, samples)
        if weather is not None:
            return weather
        if self.fallback_weather is None:
            raise ValueError("No weather samples and no fallback weather generator")
        return self.fallback_weather(when)

    def forecast_hour(
        self,
        when: datetime,
        weather: WeatherSample,
        tide: TideState,
        location: str,
    ) -> HourlyForecast:
        """Assess a single hour."""
        conditions = PaddlingConditions(
            weather=weather,
            tide=tide,
            time_of_day=when,
            location=location,
        )
        directions = self.arbiter.assess(conditions)
        return HourlyForecast(
            time=when,
            weather=weather,
            tide=tide,
            difficulty=directions.best,
            paddle_directions=directions,
        )

    def aggregate(
        self,
        day: date,
        weather_samples: Sequence[WeatherSample],
        tides: DailyTides,
        location: Optional[str] = None,
    ) -> DailyForecast:
        """Build the daily forecast from samples.

        Args:
            day: Calendar date
            weather_samples: Weather samples covering the day (any spacing)
            tides: Tide extrema for the day
            location: Location name. Defaults to the route name.

        Returns:
            DailyForecast with one entry per grid hour
        """
        location = location or self.scorer.route.name
        hourly = []
        for when in self.hourly_grid(day):
            weather = self.weather_at(when, weather_samples)
            tide = self.interpolator.interpolate(when, tides.tides)
            hourly.append(self.forecast_hour(when, weather, tide, location))

        forecast = DailyForecast(
            date=day,
            hourly_forecasts=hourly,
            summary=summarize_day(hourly),
            tides=tides,
            location=location,
        )

        issues = sorted({h.tide.data_issue for h in hourly if h.tide.data_issue})
        forecast.errors.extend(issues)

        logger.debug(
            f"Forecast for {day}: avg {forecast.summary.average_difficulty}/10, "
            f"best {forecast.summary.best_time:%H:%M}, worst {forecast.summary.worst_time:%H:%M}"
        )
        return forecast
