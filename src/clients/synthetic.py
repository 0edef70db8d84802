"""Deterministic offline sample sources.

Used when live providers fail or when running offline. The same (date, hour)
always produces the same weather and the same date always produces the
same tide times, so repeated digests agree with each other.
"""

import logging
import math
import random
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from src.core.compass import CompassDirection
from src.core.conditions import (
    DailyTides,
    TideDirection,
    TideExtremum,
    TideState,
    TideType,
    WeatherSample,
)
from src.core.tides import synthetic_tide_state
from src.core.units import round_half_up, round_to_tenth


logger = logging.getLogger(__name__)

SYNTHETIC_DIRECTIONS = [
    CompassDirection.N,
    CompassDirection.NE,
    CompassDirection.E,
    CompassDirection.SE,
    CompassDirection.S,
    CompassDirection.SW,
    CompassDirection.W,
    CompassDirection.NW,
]


def weather_seed(day: date, hour: int) -> int:
    """Seed for a (date, hour) pair. Months count 744 hours (31 days)."""
    return hour + day.day * 24 + (day.month - 1) * 744


class SyntheticWeatherSource:
    """Trigonometric weather generator seeded by date and hour."""

    NAME = "synthetic"

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def sample(self, day: date, hour: int) -> WeatherSample:
        """Generate weather for an hour of a day.

        Args:
            day: Calendar date
            hour: Hour of day (0-23)

        Returns:
            WeatherSample timestamped at the start of the hour
        """
        seed = weather_seed(day, hour)

        base_wind = 8 + math.sin(seed * 0.1) * 15
        daily_variation = math.sin((hour - 12) * math.pi / 12) * 4
        seeded_variation = (math.sin(seed * 0.3) + math.cos(seed * 0.7)) * 3
        wind_speed = max(3, round_half_up(base_wind + daily_variation + seeded_variation))

        index = math.floor(abs(math.sin(seed * 0.2)) * len(SYNTHETIC_DIRECTIONS))
        direction = SYNTHETIC_DIRECTIONS[index]

        base_temp = 18 + math.sin((hour - 6) * math.pi / 12) * 6
        temp_variation = (math.sin(seed * 0.15) + math.cos(seed * 0.45)) * 3

        weather = WeatherSample(
            wind_speed=int(wind_speed),
            wind_direction=direction,
            gust_speed=int(round_half_up(wind_speed + 3 + abs(math.sin(seed * 0.5)) * 6)),
            temperature=round_half_up(base_temp + temp_variation),
            timestamp=datetime.combine(day, time(hour), tzinfo=self.tz),
        )
        logger.debug(
            f"Generated weather for {day} {hour:02d}:00: {weather.wind_speed}km/h {direction}, "
            f"{weather.temperature}C, gusts {weather.gust_speed}km/h"
        )
        return weather

    def sample_at(self, when: datetime) -> WeatherSample:
        """Weather for the hour containing `when`."""
        return self.sample(when.date(), when.hour)

    def get_current_weather(self, now: Optional[datetime] = None) -> WeatherSample:
        now = now or datetime.now(self.tz)
        return self.sample_at(now)

    def get_day_forecast(self, day: date, start_hour: int = 0, end_hour: int = 23) -> list[WeatherSample]:
        """Hourly samples for a day (hours inclusive)."""
        return [self.sample(day, hour) for hour in range(start_hour, end_hour + 1)]


class SyntheticTideSource:
    """Four alternating high/low tides per day with reproducible jitter."""

    NAME = "synthetic"

    # (base hour, type, base height m)
    PATTERN = [
        (2, TideType.HIGH, 1.5),
        (8, TideType.LOW, 0.2),
        (14, TideType.HIGH, 1.5),
        (20, TideType.LOW, 0.2),
    ]
    TIME_JITTER_HOURS = 1.0
    HEIGHT_JITTER_M = 0.2

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def get_daily_extrema(self, day: date) -> DailyTides:
        """Generate the tide times for a date.

        Args:
            day: Calendar date

        Returns:
            DailyTides with four extrema sorted by time
        """
        rng = random.Random(day.toordinal())
        start_of_day = datetime.combine(day, time(0), tzinfo=self.tz)

        tides = []
        for base_hour, tide_type, base_height in self.PATTERN:
            offset = rng.uniform(-self.TIME_JITTER_HOURS, self.TIME_JITTER_HOURS)
            height = base_height + rng.uniform(-self.HEIGHT_JITTER_M, self.HEIGHT_JITTER_M)
            tides.append(TideExtremum(
                time=start_of_day + timedelta(hours=base_hour + offset),
                height=round_to_tenth(height),
                type=tide_type,
            ))

        tides.sort(key=lambda t: t.time)
        logger.debug(
            f"Generated tides for {day}: "
            + ", ".join(f"{t.time:%H:%M} {t.height}m {t.type.value}" for t in tides)
        )
        return DailyTides(date=day, tides=tides)

    def get_current_tide(self, now: Optional[datetime] = None) -> TideState:
        """Tide state now from the 12-hour pattern, jittered by (date, hour)."""
        now = now or datetime.now(self.tz)
        rng = random.Random(weather_seed(now.date(), now.hour))
        return synthetic_tide_state(now, jitter=rng.uniform(-0.15, 0.15))


# Reference conditions for demos and tests (Ian Shaw Park, 17 Aug 2024)
SAMPLE_WEATHER = [
    WeatherSample(5, CompassDirection.NE, 8, 22, datetime(2024, 8, 17, 17, 30)),
    WeatherSample(15, CompassDirection.SW, 25, 18, datetime(2024, 8, 17, 17, 30)),
    WeatherSample(25, CompassDirection.W, 35, 16, datetime(2024, 8, 17, 17, 30)),
    WeatherSample(8, CompassDirection.E, 12, 24, datetime(2024, 8, 17, 16, 0)),
]

SAMPLE_TIDES = [
    TideState(
        height=1.8,
        type=TideType.HIGH,
        direction=TideDirection.SLACK,
        next_change=datetime(2024, 8, 17, 22, 15),
        timestamp=datetime(2024, 8, 17, 17, 30),
    ),
    TideState(
        height=0.4,
        type=TideType.LOW,
        direction=TideDirection.OUTGOING,
        next_change=datetime(2024, 8, 17, 23, 45),
        timestamp=datetime(2024, 8, 17, 17, 30),
    ),
    TideState(
        height=1.2,
        type=TideType.HIGH,
        direction=TideDirection.INCOMING,
        next_change=datetime(2024, 8, 17, 21, 0),
        timestamp=datetime(2024, 8, 17, 17, 30),
    ),
]
