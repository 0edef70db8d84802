"""Paddling difficulty scoring for a single leg.

Scoring approach:
- Four independent factors, each clamped to 1-5
- Total score = round(sum(factors) / 20 * 10), clamped to 0-10
- Level: 7+ easy, 4-6 moderate, below 4 difficult

Scoring Factors:
- Wind: speed band, gust spread, and whether the wind helps this leg
  (tailwind +2, crosswind +1, headwind -1)
- Tide: depth band, high-water bonus, and whether the stream runs with
  this leg (with +2, slack +1, against +0)
- Time of Day: late afternoon favoured (16-19h best)
- Temperature: 20-26C best
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from src.core.conditions import PaddlingConditions, TideDirection, TideState, TideType, WeatherSample
from src.core.route import Leg, Route, WindEffect, default_route
from src.core.units import clamp, round_half_up


class DifficultyLevel(Enum):
    """Overall paddling difficulty."""
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"


@dataclass
class DifficultyFactors:
    """Factor scores (1-5 each)."""
    wind: float
    tide: float
    time: float
    temperature: float

    @property
    def total(self) -> float:
        return self.wind + self.tide + self.time + self.temperature


@dataclass
class DifficultyAssessment:
    """Difficulty of one leg under one set of conditions."""
    score: int
    level: DifficultyLevel
    factors: DifficultyFactors
    recommendation: str = ""

    @property
    def is_easy(self) -> bool:
        return self.level is DifficultyLevel.EASY


def fmt(value: float) -> str:
    """Format a measurement without a trailing .0"""
    return f"{value:g}"


class DifficultyScorer:
    """Scores paddling difficulty for a leg of the route."""

    FACTOR_MIN = 1
    FACTOR_MAX = 5
    SCORE_MIN = 0
    SCORE_MAX = 10

    # Level thresholds (score 0-10)
    EASY_THRESHOLD = 7
    MODERATE_THRESHOLD = 4

    # Wind speed bands (km/h)
    WIND_LIGHT = 10
    WIND_MODERATE = 20

    # Gust spread bands (km/h above mean wind)
    GUST_STEADY = 5
    GUST_GUSTY = 15

    def __init__(self, route: Optional[Route] = None):
        """Initialize the scorer.

        Args:
            route: Route defining per-leg wind tables. Defaults to Ian Shaw Park.
        """
        self.route = route or default_route()

    def score_wind(self, weather: WeatherSample, leg: Leg) -> float:
        """Score wind conditions for a leg.

        Args:
            weather: Weather sample
            leg: Travel direction

        Returns:
            Score 1-5
        """
        if weather.wind_speed <= self.WIND_LIGHT:
            score = 3
        elif weather.wind_speed <= self.WIND_MODERATE:
            score = 2
        else:
            score = 1

        spread = weather.gust_spread
        if spread <= self.GUST_STEADY:
            score += 2
        elif spread <= self.GUST_GUSTY:
            score += 1

        score += self.route.wind_effect(leg, weather.wind_direction).bonus

        return clamp(score, self.FACTOR_MIN, self.FACTOR_MAX)

    def score_tide(self, tide: TideState, leg: Leg) -> float:
        """Score tide conditions for a leg.

        Depth matters for launching and landing; the tidal stream either
        carries the paddler or works against them.

        Args:
            tide: Tide state
            leg: Travel direction

        Returns:
            Score 1-5
        """
        if tide.height >= 1.5:
            score = 2.0
        elif tide.height >= 1.0:
            score = 1.5
        elif tide.height >= 0.5:
            score = 1.0
        else:
            score = 0.5

        if tide.type is TideType.HIGH:
            score += 0.5

        if self.tide_assists(tide, leg):
            score += 2
        elif tide.direction is TideDirection.SLACK:
            score += 1

        return clamp(score, self.FACTOR_MIN, self.FACTOR_MAX)

    def score_time_of_day(self, when: datetime) -> float:
        """Score based on hour of day. Late afternoon is the best window."""
        hour = when.hour

        if 16 <= hour <= 19:
            return 5
        if 15 <= hour <= 20:
            return 4
        if 14 <= hour <= 21:
            return 3
        if 10 <= hour <= 22:
            return 2
        return 1

    def score_temperature(self, temperature: float) -> float:
        """Score air temperature (degrees C)."""
        if 20 <= temperature <= 26:
            return 5
        if 18 <= temperature <= 28:
            return 4
        if 15 <= temperature <= 30:
            return 3
        if 12 <= temperature <= 32:
            return 2
        return 1

    def tide_assists(self, tide: TideState, leg: Leg) -> bool:
        """Whether the tidal stream runs the same way as the leg."""
        return tide.direction.value == leg.value

    def tide_opposes(self, tide: TideState, leg: Leg) -> bool:
        """Whether the tidal stream runs against the leg."""
        return tide.direction.value == leg.opposite.value

    def classify(self, score: int) -> DifficultyLevel:
        """Convert a 0-10 score to a difficulty level."""
        if score >= self.EASY_THRESHOLD:
            return DifficultyLevel.EASY
        if score >= self.MODERATE_THRESHOLD:
            return DifficultyLevel.MODERATE
        return DifficultyLevel.DIFFICULT

    def assess(
        self,
        weather: WeatherSample,
        tide: TideState,
        when: datetime,
        leg: Leg,
    ) -> DifficultyAssessment:
        """Calculate the complete difficulty assessment for a leg.

        Args:
            weather: Weather sample
            tide: Tide state
            when: Time being assessed
            leg: Travel direction

        Returns:
            DifficultyAssessment with score, level, factors and recommendation
        """
        factors = DifficultyFactors(
            wind=self.score_wind(weather, leg),
            tide=self.score_tide(tide, leg),
            time=self.score_time_of_day(when),
            temperature=self.score_temperature(weather.temperature),
        )

        normalized = round_half_up(factors.total / 20 * 10)
        score = int(clamp(normalized, self.SCORE_MIN, self.SCORE_MAX))

        assessment = DifficultyAssessment(
            score=score,
            level=self.classify(score),
            factors=factors,
        )
        assessment.recommendation = self._generate_recommendation(weather, tide, leg, assessment)
        return assessment

    def assess_conditions(self, conditions: PaddlingConditions, leg: Leg) -> DifficultyAssessment:
        """Assess a leg from a PaddlingConditions bundle."""
        return self.assess(conditions.weather, conditions.tide, conditions.time_of_day, leg)

    def _generate_recommendation(
        self,
        weather: WeatherSample,
        tide: TideState,
        leg: Leg,
        assessment: DifficultyAssessment,
    ) -> str:
        """Generate the human-readable recommendation for a leg.

        Args:
            weather: Weather sample
            tide: Tide state
            leg: Travel direction
            assessment: Scored assessment (level and factors)

        Returns:
            Recommendation text
        """
        phrase = self.route.leg(leg).phrase
        factors = assessment.factors
        effect = self.route.wind_effect(leg, weather.wind_direction)
        wind_dir = weather.wind_direction.value
        tide_dir = tide.direction.value

        parts = []

        if assessment.level is DifficultyLevel.EASY:
            parts.append(f"Perfect conditions for paddling {phrase}!")

            if factors.wind >= 4:
                help_text = "tailwind" if effect is WindEffect.TAILWIND else "favorable wind"
                parts.append(f"{wind_dir} winds ({fmt(weather.wind_speed)}km/h) provide a {help_text}.")
            if factors.tide >= 4:
                if self.tide_assists(tide, leg):
                    parts.append(f"{tide_dir.capitalize()} tide assists your paddle {phrase}.")
                else:
                    parts.append(f"Good tide conditions with {fmt(tide.height)}m depth.")

        elif assessment.level is DifficultyLevel.MODERATE:
            parts.append(f"Moderate conditions for paddling {phrase}.")

            if factors.wind < 3:
                challenge = "headwind" if effect is WindEffect.HEADWIND else "challenging wind"
                parts.append(f"{wind_dir} winds ({fmt(weather.wind_speed)}km/h) create a {challenge}.")
            if factors.tide < 3 and self.tide_opposes(tide, leg):
                parts.append(
                    f"{tide_dir.capitalize()} tide ({fmt(tide.height)}m) works against your paddle {phrase}."
                )

        else:
            parts.append(f"Challenging conditions for paddling {phrase} - consider avoiding.")

            if factors.wind < 2:
                parts.append(
                    f"Strong {wind_dir} winds ({fmt(weather.wind_speed)}km/h) with gusts to "
                    f"{fmt(weather.gust_speed)}km/h make paddling difficult."
                )
            if factors.tide < 2:
                parts.append(f"Tide conditions ({fmt(tide.height)}m, {tide_dir}) are poor for paddling {phrase}.")

        return " ".join(parts)
