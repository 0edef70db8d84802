"""Choosing which leg (or both) to paddle under given conditions.

Decision rule:
- both legs easy -> both
- both legs difficult -> neither
- otherwise the strictly higher score wins; ties go to incoming
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.core.conditions import PaddlingConditions, TideDirection
from src.core.route import Leg
from src.core.scorer import DifficultyAssessment, DifficultyLevel, DifficultyScorer, fmt


class Recommendation(Enum):
    """Which legs are worth paddling."""
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"
    NEITHER = "neither"


@dataclass
class PaddleDirectionAssessment:
    """Assessments of both legs plus the combined recommendation."""
    outgoing: DifficultyAssessment
    incoming: DifficultyAssessment
    recommended: Recommendation
    reasoning: str

    def for_leg(self, leg: Leg) -> DifficultyAssessment:
        return self.outgoing if leg is Leg.OUTGOING else self.incoming

    @property
    def best(self) -> DifficultyAssessment:
        """The better-scoring leg's assessment (outgoing on ties)."""
        if self.outgoing.score >= self.incoming.score:
            return self.outgoing
        return self.incoming


class DirectionArbiter:
    """Compares the two legs and explains the choice."""

    def __init__(self, scorer: Optional[DifficultyScorer] = None):
        self.scorer = scorer or DifficultyScorer()
        self.route = self.scorer.route

    def decide(
        self,
        outgoing: DifficultyAssessment,
        incoming: DifficultyAssessment,
    ) -> Recommendation:
        """Pick the recommended leg(s)."""
        if outgoing.level is DifficultyLevel.EASY and incoming.level is DifficultyLevel.EASY:
            return Recommendation.BOTH
        if outgoing.level is DifficultyLevel.DIFFICULT and incoming.level is DifficultyLevel.DIFFICULT:
            return Recommendation.NEITHER
        if outgoing.score > incoming.score:
            return Recommendation.OUTGOING
        return Recommendation.INCOMING

    def assess(self, conditions: PaddlingConditions) -> PaddleDirectionAssessment:
        """Score both legs and combine them into a recommendation.

        Args:
            conditions: Weather, tide and time being assessed

        Returns:
            PaddleDirectionAssessment
        """
        outgoing = self.scorer.assess_conditions(conditions, Leg.OUTGOING)
        incoming = self.scorer.assess_conditions(conditions, Leg.INCOMING)
        return self.arbitrate(conditions, outgoing, incoming)

    def arbitrate(
        self,
        conditions: PaddlingConditions,
        outgoing: DifficultyAssessment,
        incoming: DifficultyAssessment,
    ) -> PaddleDirectionAssessment:
        """Combine two pre-computed leg assessments."""
        recommended = self.decide(outgoing, incoming)
        return PaddleDirectionAssessment(
            outgoing=outgoing,
            incoming=incoming,
            recommended=recommended,
            reasoning=self._generate_reasoning(conditions, outgoing, incoming, recommended),
        )

    def _generate_reasoning(
        self,
        conditions: PaddlingConditions,
        outgoing: DifficultyAssessment,
        incoming: DifficultyAssessment,
        recommended: Recommendation,
    ) -> str:
        """Explain the recommendation with the actual wind, tide and scores."""
        weather = conditions.weather
        tide = conditions.tide
        out_leg = self.route.leg(Leg.OUTGOING)
        in_leg = self.route.leg(Leg.INCOMING)
        reasons = []

        wind = f"{weather.wind_direction.value} winds ({fmt(weather.wind_speed)}km/h)"
        favoured = self.route.favoured_leg(weather.wind_direction)
        if favoured is Leg.OUTGOING:
            reasons.append(f"{wind} favor outgoing paddle to {out_leg.destination}")
        elif favoured is Leg.INCOMING:
            reasons.append(f"{wind} favor incoming paddle to {in_leg.destination}")
        else:
            reasons.append(f"{wind} create crosswind conditions")

        height = fmt(tide.height)
        if tide.direction is TideDirection.OUTGOING:
            reasons.append(f"Outgoing tide ({height}m) assists paddle toward {out_leg.destination}")
        elif tide.direction is TideDirection.INCOMING:
            reasons.append(f"Incoming tide ({height}m) assists return to {in_leg.destination}")
        else:
            reasons.append(f"Slack tide ({height}m) provides neutral conditions")

        out_score = f"{outgoing.score}/10"
        in_score = f"{incoming.score}/10"
        if recommended is Recommendation.BOTH:
            conclusion = f"Both directions score well (Out: {out_score}, In: {in_score}) - excellent conditions for round trip"
        elif recommended is Recommendation.OUTGOING:
            conclusion = f"Outgoing performs better ({out_score} vs {in_score}) - ideal for paddling out"
        elif recommended is Recommendation.INCOMING:
            # Also used for ties
            conclusion = f"Incoming performs better ({in_score} vs {out_score}) - better for returning"
        else:
            conclusion = f"Both directions challenging (Out: {out_score}, In: {in_score}) - consider postponing"

        return f"{'. '.join(reasons)}. {conclusion}."


def assess_paddle_directions(
    conditions: PaddlingConditions,
    scorer: Optional[DifficultyScorer] = None,
) -> PaddleDirectionAssessment:
    """Quick access to assess both legs."""
    return DirectionArbiter(scorer).assess(conditions)


def assess_paddling_difficulty(
    conditions: PaddlingConditions,
    scorer: Optional[DifficultyScorer] = None,
) -> DifficultyAssessment:
    """The better of the two legs' assessments (outgoing on ties)."""
    return assess_paddle_directions(conditions, scorer).best
