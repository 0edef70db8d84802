"""Tide state interpolation between high/low extrema.

Tide providers give sparse high/low events. The paddling assessment needs
a tide state at arbitrary instants, derived here by bracketing the target
time between the surrounding extrema and interpolating linearly:

    h = before.height + (after.height - before.height) * elapsed / span

Edge handling:
- No extrema: neutral fallback state (1.0m, high, slack), flagged as no data
- Only one side of the bracket: plateau at that extremum, slack
- Duplicate timestamps: logged; the bracket still interpolates over its span
- A bracket with a zero time span: diurnal sinusoid instead of dividing,
  flagged as a data-quality defect
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from src.core.errors import DataQualityDefect
from src.core.conditions import TideDirection, TideExtremum, TideState, TideType
from src.core.units import round_to_tenth


logger = logging.getLogger(__name__)

NO_DATA_ISSUE = "No tide data available - neutral fallback state"


def synthetic_tide_state(when: datetime, jitter: float = 0.0) -> TideState:
    """Tide state from a 12-hour sinusoid (mean 1.0m, amplitude 0.8m).

    Used when real extrema are unusable and by the synthetic tide source.

    Args:
        when: Instant to evaluate
        jitter: Height offset in meters added to the pattern

    Returns:
        TideState following the diurnal pattern
    """
    hour = when.hour + when.minute / 60
    height = 1.0 + math.sin((hour + 3) * math.pi / 6) * 0.8 + jitter
    ahead = 1.0 + math.sin((hour + 0.5 + 3) * math.pi / 6) * 0.8

    change = ahead - height
    if change > TideInterpolator.SLACK_THRESHOLD_M:
        direction = TideDirection.INCOMING
    elif change < -TideInterpolator.SLACK_THRESHOLD_M:
        direction = TideDirection.OUTGOING
    else:
        direction = TideDirection.SLACK

    hours_to_change = 6 - (when.hour % 6)
    return TideState(
        height=round_to_tenth(height),
        type=TideType.HIGH if height > 1.2 else TideType.LOW,
        direction=direction,
        next_change=when + timedelta(hours=hours_to_change),
        timestamp=when,
    )


class TideInterpolator:
    """Derives continuous tide states from sparse high/low extrema."""

    # Height change across a bracket below this is treated as slack water
    SLACK_THRESHOLD_M = 0.1

    # Fallback horizon for the next change when there is no later extremum
    DEFAULT_NEXT_CHANGE = timedelta(hours=6)

    NEUTRAL_HEIGHT_M = 1.0

    def neutral_state(self, target: datetime) -> TideState:
        """The "no data" state. Not a measurement."""
        return TideState(
            height=self.NEUTRAL_HEIGHT_M,
            type=TideType.HIGH,
            direction=TideDirection.SLACK,
            next_change=target + self.DEFAULT_NEXT_CHANGE,
            timestamp=target,
            data_issue=NO_DATA_ISSUE,
        )

    def interpolate(
        self,
        target: datetime,
        extrema: Sequence[TideExtremum],
    ) -> TideState:
        """Interpolate the tide state at a target instant.

        Args:
            target: Instant to evaluate
            extrema: High/low events, in any order

        Returns:
            TideState at the target instant
        """
        if not extrema:
            logger.warning("No tide extrema available for interpolation")
            return self.neutral_state(target)

        ordered = sorted(extrema, key=lambda t: t.time)
        before, after = self._bracket(target, ordered)

        # Only one side of the bracket exists: hold that extremum's height
        if before is None or after is None:
            edge = before or after
            logger.debug(
                f"Single-sided bracket at {target.isoformat()}: "
                f"plateau at {edge.height}m ({edge.type.value})"
            )
            return TideState(
                height=round_to_tenth(edge.height),
                type=edge.type,
                direction=TideDirection.SLACK,
                next_change=target + self.DEFAULT_NEXT_CHANGE,
                timestamp=target,
            )

        duplicates = self._duplicate_times(ordered)
        if duplicates:
            logger.warning(
                f"Duplicate tide timestamps ignored for bracketing: "
                f"{', '.join(t.isoformat() for t in duplicates)}"
            )

        mean_height = sum(t.height for t in ordered) / len(ordered)
        return self.interpolate_between(target, before, after, mean_height)

    def interpolate_between(
        self,
        target: datetime,
        before: TideExtremum,
        after: TideExtremum,
        mean_height: float,
    ) -> TideState:
        """Linear tide state between two bracketing extrema.

        A bracket without a positive time span cannot be divided; the state
        then comes from the diurnal sinusoid and carries the defect text.
        """
        span = (after.time - before.time).total_seconds()
        if span <= 0:
            defect = DataQualityDefect(
                f"Zero-length tide bracket at {target.isoformat()} "
                f"({before.time.isoformat()} / {after.time.isoformat()})"
            )
            logger.warning(f"{defect} - using synthetic tide pattern")
            state = synthetic_tide_state(target)
            state.data_issue = str(defect)
            return state

        elapsed = (target - before.time).total_seconds()
        ratio = elapsed / span
        height = before.height + (after.height - before.height) * ratio

        state = TideState(
            height=round_to_tenth(height),
            type=TideType.HIGH if height > mean_height else TideType.LOW,
            direction=self.direction_between(before, after),
            next_change=after.time,
            timestamp=target,
        )

        logger.debug(
            f"Interpolated {state.height}m {state.direction.value} at {target.isoformat()} "
            f"between {before.height}m and {after.height}m (ratio {ratio:.2f})"
        )
        return state

    def direction_between(self, before: TideExtremum, after: TideExtremum) -> TideDirection:
        """Classify the water movement between two consecutive extrema."""
        change = after.height - before.height
        if abs(change) < self.SLACK_THRESHOLD_M:
            return TideDirection.SLACK
        if change > 0:
            return TideDirection.INCOMING
        return TideDirection.OUTGOING

    def _bracket(
        self,
        target: datetime,
        ordered: Sequence[TideExtremum],
    ) -> tuple[Optional[TideExtremum], Optional[TideExtremum]]:
        """Find the latest extremum at/before and the earliest after the target."""
        before = None
        after = None
        for tide in ordered:
            if tide.time <= target:
                before = tide
            elif after is None:
                after = tide
                break
        return before, after

    def _duplicate_times(self, ordered: Sequence[TideExtremum]) -> list[datetime]:
        """Timestamps shared by more than one extremum."""
        duplicates = []
        for previous, current in zip(ordered, ordered[1:]):
            if current.time == previous.time and current.time not in duplicates:
                duplicates.append(current.time)
        return duplicates


def interpolate_tide_at(target: datetime, extrema: Sequence[TideExtremum]) -> TideState:
    """Quick access to interpolate a tide state."""
    return TideInterpolator().interpolate(target, extrema)


def classify_extrema(values: Sequence[tuple[datetime, float]]) -> list[TideExtremum]:
    """Turn raw (time, height) extrema into typed high/low events.

    An extremum is high when it lies above the mean of the set.

    Args:
        values: (time, height in meters) pairs

    Returns:
        TideExtremum list sorted by time
    """
    if not values:
        return []

    mean_height = sum(h for _, h in values) / len(values)
    extrema = [
        TideExtremum(
            time=time,
            height=round_to_tenth(height),
            type=TideType.HIGH if height > mean_height else TideType.LOW,
        )
        for time, height in values
    ]
    return sorted(extrema, key=lambda t: t.time)


# Regular series (10-minute interval) analysis
SERIES_TREND_THRESHOLD_M = 0.05
SERIES_LOOKAHEAD = 19


def tide_state_from_series(
    series: Sequence[tuple[datetime, float]],
    index: int = 0,
) -> TideState:
    """Derive a tide state from a regularly sampled height series.

    Args:
        series: (time, height) samples in time order
        index: Position of the sample to describe

    Returns:
        TideState at series[index]
    """
    time, height = series[index]

    upcoming = [h for _, h in series[index + 1:index + 1 + SERIES_LOOKAHEAD]]
    if upcoming:
        is_high = height >= sum(upcoming) / len(upcoming)
    else:
        is_high = height > 1.0

    # Trend over the next two samples
    direction = TideDirection.SLACK
    if len(series) >= 3 and index < len(series) - 2:
        change = series[index + 2][1] - height
        if change > SERIES_TREND_THRESHOLD_M:
            direction = TideDirection.INCOMING
        elif change < -SERIES_TREND_THRESHOLD_M:
            direction = TideDirection.OUTGOING

    return TideState(
        height=round_to_tenth(height),
        type=TideType.HIGH if is_high else TideType.LOW,
        direction=direction,
        next_change=_next_turning_point(series, index),
        timestamp=time,
    )


def _next_turning_point(series: Sequence[tuple[datetime, float]], index: int) -> datetime:
    """Time of the first local maximum/minimum after index."""
    for i in range(index + 1, len(series) - 1):
        prev = series[i - 1][1]
        current = series[i][1]
        following = series[i + 1][1]
        if (prev < current > following) or (prev > current < following):
            return series[i][0]
    return series[index][0] + TideInterpolator.DEFAULT_NEXT_CHANGE
