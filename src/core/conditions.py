"""Weather and tide sample types consumed by the assessment engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from src.core.compass import CompassDirection


class TideType(Enum):
    """Relative tide classification."""
    HIGH = "high"
    LOW = "low"


class TideDirection(Enum):
    """Which way the water is moving."""
    INCOMING = "incoming"
    OUTGOING = "outgoing"
    SLACK = "slack"


@dataclass(frozen=True)
class WeatherSample:
    """Weather at an instant (km/h, degrees C)."""
    wind_speed: float
    wind_direction: CompassDirection
    gust_speed: float
    temperature: float
    timestamp: datetime

    @property
    def gust_spread(self) -> float:
        """How much stronger the gusts are than the mean wind."""
        return self.gust_speed - self.wind_speed


@dataclass(frozen=True)
class TideExtremum:
    """A recorded high or low tide event."""
    time: datetime
    height: float  # meters
    type: TideType

    @property
    def is_high(self) -> bool:
        return self.type == TideType.HIGH


@dataclass
class DailyTides:
    """Tide extrema for one calendar date."""
    date: date
    tides: list[TideExtremum] = field(default_factory=list)


@dataclass
class TideState:
    """Tide conditions at an instant, derived from extrema.

    `data_issue` is set when the state did not come from a real bracketing
    interval (no data, or degenerate input replaced by a synthetic pattern).
    Such states must not be presented as measurements.
    """
    height: float
    type: TideType
    direction: TideDirection
    next_change: datetime
    timestamp: datetime
    data_issue: Optional[str] = None

    @property
    def is_measured(self) -> bool:
        return self.data_issue is None


@dataclass
class PaddlingConditions:
    """Everything needed to assess one instant."""
    weather: WeatherSample
    tide: TideState
    time_of_day: datetime
    location: str
