"""Ordered sample-source strategies with tagged results.

Each data need (current weather, hourly weather, tide extrema, current
tide) has an ordered list of strategies: live providers first, synthetic
generators last. Strategies never raise; they return a SourceResult that
carries either a value or the SourceError that stopped it. The chain walks
the list and the first success wins.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from src.core.errors import SourceError


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SourceResult(Generic[T]):
    """Outcome of one strategy: a value or an error, never both."""
    source: str
    value: Optional[T] = None
    error: Optional[SourceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


class SourceStrategy(Generic[T]):
    """A named way of fetching a sample."""

    def __init__(self, name: str, fetch: Callable[..., T]):
        """Initialize the strategy.

        Args:
            name: Source name shown in statuses (e.g. "openweathermap")
            fetch: Callable returning the sample or raising SourceError
        """
        self.name = name
        self._fetch = fetch

    def run(self, *args: Any) -> SourceResult[T]:
        """Fetch and tag the outcome."""
        try:
            value = self._fetch(*args)
        except SourceError as e:
            return SourceResult(source=self.name, error=e)
        if value is None:
            return SourceResult(
                source=self.name,
                error=SourceError(f"{self.name} returned no data", source=self.name),
            )
        return SourceResult(source=self.name, value=value)

    def __repr__(self) -> str:
        return f"SourceStrategy({self.name!r})"


@dataclass
class ChainOutcome(Generic[T]):
    """Every attempt made by a chain and the winning result, if any."""
    attempts: list[SourceResult[T]] = field(default_factory=list)

    @property
    def result(self) -> Optional[SourceResult[T]]:
        for attempt in self.attempts:
            if attempt.ok:
                return attempt
        return None

    @property
    def value(self) -> Optional[T]:
        result = self.result
        return result.value if result else None

    @property
    def source(self) -> Optional[str]:
        result = self.result
        return result.source if result else None

    @property
    def errors(self) -> list[str]:
        return [f"{a.source}: {a.error}" for a in self.attempts if a.error is not None]


class SourceChain(Generic[T]):
    """Tries strategies in order until one succeeds."""

    def __init__(self, purpose: str, strategies: list[SourceStrategy[T]]):
        self.purpose = purpose
        self.strategies = list(strategies)

    def first_success(self, *args: Any) -> ChainOutcome[T]:
        """Run strategies in order, stopping at the first success.

        Args:
            *args: Passed to every strategy

        Returns:
            ChainOutcome with all attempts made
        """
        outcome: ChainOutcome[T] = ChainOutcome()
        for strategy in self.strategies:
            result = strategy.run(*args)
            outcome.attempts.append(result)
            if result.ok:
                if len(outcome.attempts) > 1:
                    logger.info(f"{self.purpose}: using {strategy.name} after {len(outcome.attempts) - 1} failure(s)")
                return outcome
            logger.warning(f"{self.purpose}: {strategy.name} failed: {result.error}")

        logger.warning(f"{self.purpose}: all {len(self.strategies)} source(s) failed")
        return outcome


@dataclass
class SourceStatus:
    """Success/failure tally for one data source."""
    name: str
    success_count: int = 0
    failure_count: int = 0
    last_error: Optional[str] = None

    @property
    def total_calls(self) -> int:
        return self.success_count + self.failure_count

    @property
    def success_rate(self) -> float:
        if self.total_calls == 0:
            return 0.0
        return (self.success_count / self.total_calls) * 100


def collect_statuses(outcomes: list[ChainOutcome]) -> list[SourceStatus]:
    """Tally attempts per source across chain outcomes."""
    statuses: dict[str, SourceStatus] = {}
    for outcome in outcomes:
        for attempt in outcome.attempts:
            status = statuses.setdefault(attempt.source, SourceStatus(attempt.source))
            if attempt.ok:
                status.success_count += 1
            else:
                status.failure_count += 1
                status.last_error = str(attempt.error)
    return list(statuses.values())
