"""Core paddle condition assessment engine.

The planner (src.core.planner) is not re-exported here: it imports the
clients, which in turn import this package.
"""

from src.core.arbiter import (
    DirectionArbiter,
    PaddleDirectionAssessment,
    Recommendation,
    assess_paddle_directions,
    assess_paddling_difficulty,
)
from src.core.compass import CompassDirection
from src.core.conditions import (
    DailyTides,
    PaddlingConditions,
    TideDirection,
    TideExtremum,
    TideState,
    TideType,
    WeatherSample,
)
from src.core.config import AppConfig, load_config
from src.core.forecast import (
    DailyForecast,
    DailySummary,
    ExtendedForecast,
    ForecastAggregator,
    HourlyForecast,
)
from src.core.route import Coordinates, Leg, Route, WindEffect, default_route
from src.core.scorer import (
    DifficultyAssessment,
    DifficultyFactors,
    DifficultyLevel,
    DifficultyScorer,
)
from src.core.tides import TideInterpolator, interpolate_tide_at

__all__ = [
    # Samples
    "CompassDirection",
    "DailyTides",
    "PaddlingConditions",
    "TideDirection",
    "TideExtremum",
    "TideState",
    "TideType",
    "WeatherSample",
    # Route / config
    "AppConfig",
    "Coordinates",
    "Leg",
    "Route",
    "WindEffect",
    "default_route",
    "load_config",
    # Tides
    "TideInterpolator",
    "interpolate_tide_at",
    # Scorer
    "DifficultyAssessment",
    "DifficultyFactors",
    "DifficultyLevel",
    "DifficultyScorer",
    # Arbiter
    "DirectionArbiter",
    "PaddleDirectionAssessment",
    "Recommendation",
    "assess_paddle_directions",
    "assess_paddling_difficulty",
    # Forecast
    "DailyForecast",
    "DailySummary",
    "ExtendedForecast",
    "ForecastAggregator",
    "HourlyForecast",
]
