"""Paddle route model.

A route joins two fixed shore points. It is paddled in two legs:
outgoing (away from the launch) and incoming (back to it). Each leg has a
set of wind directions that blow the paddler along; the other leg's
tailwinds are that leg's headwinds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from src.core.compass import CompassDirection


class Leg(Enum):
    """One of the two travel directions between the shore points."""
    OUTGOING = "outgoing"
    INCOMING = "incoming"

    @property
    def opposite(self) -> "Leg":
        return Leg.INCOMING if self is Leg.OUTGOING else Leg.OUTGOING


class WindEffect(Enum):
    """How a wind direction affects a leg, with its wind-factor bonus."""
    TAILWIND = 2
    CROSSWIND = 1
    NEUTRAL = 0
    HEADWIND = -1

    @property
    def bonus(self) -> int:
        return self.value


@dataclass
class Coordinates:
    """Geographic coordinates."""
    lat: float
    lon: float


@dataclass
class LegDefinition:
    """Where a leg goes and which winds help it."""
    leg: Leg
    destination: str
    phrase: str  # e.g. "towards Bucklands Beach"
    tailwinds: frozenset[CompassDirection] = field(default_factory=frozenset)


@dataclass
class Route:
    """The paddle route and its per-leg wind tables."""
    name: str
    coordinates: Coordinates
    outgoing: LegDefinition
    incoming: LegDefinition
    crosswinds: frozenset[CompassDirection] = field(default_factory=frozenset)

    def __post_init__(self):
        overlap = self.outgoing.tailwinds & self.incoming.tailwinds
        if overlap:
            names = ", ".join(sorted(d.value for d in overlap))
            raise ValueError(f"Wind directions cannot be tailwinds for both legs: {names}")
        self._tables = {leg: self._build_table(leg) for leg in Leg}

    def leg(self, leg: Leg) -> LegDefinition:
        """Get the definition of a leg."""
        return self.outgoing if leg is Leg.OUTGOING else self.incoming

    def wind_table(self, leg: Leg) -> dict[CompassDirection, WindEffect]:
        """Effect of every compass direction on a leg."""
        return self._tables[leg]

    def wind_effect(self, leg: Leg, direction: CompassDirection) -> WindEffect:
        """Effect of a wind direction on a leg."""
        return self._tables[leg][direction]

    def favoured_leg(self, direction: CompassDirection) -> Optional[Leg]:
        """The leg this wind is a tailwind for, if any."""
        for leg in Leg:
            if self.wind_effect(leg, direction) is WindEffect.TAILWIND:
                return leg
        return None

    def with_swapped_legs(self) -> "Route":
        """Copy of the route with the legs' tailwind sets exchanged."""
        return Route(
            name=self.name,
            coordinates=self.coordinates,
            outgoing=LegDefinition(
                Leg.OUTGOING, self.outgoing.destination, self.outgoing.phrase,
                self.incoming.tailwinds,
            ),
            incoming=LegDefinition(
                Leg.INCOMING, self.incoming.destination, self.incoming.phrase,
                self.outgoing.tailwinds,
            ),
            crosswinds=self.crosswinds,
        )

    def _build_table(self, leg: Leg) -> dict[CompassDirection, WindEffect]:
        tailwinds = self.leg(leg).tailwinds
        headwinds = self.leg(leg.opposite).tailwinds

        table = {}
        for direction in CompassDirection:
            if direction in tailwinds:
                table[direction] = WindEffect.TAILWIND
            elif direction in headwinds:
                table[direction] = WindEffect.HEADWIND
            elif direction in self.crosswinds:
                table[direction] = WindEffect.CROSSWIND
            else:
                table[direction] = WindEffect.NEUTRAL
        return table


def parse_directions(values: Iterable[str]) -> frozenset[CompassDirection]:
    """Parse a list of compass abbreviations."""
    return frozenset(CompassDirection.parse(v) for v in values)


def parse_route(data: dict) -> Route:
    """Build a Route from its YAML mapping."""
    coords = data.get("coordinates", {})
    legs = data.get("legs", {})
    out_data = legs.get("outgoing", {})
    in_data = legs.get("incoming", {})
    name = data.get("name", "Ian Shaw Park")

    return Route(
        name=name,
        coordinates=Coordinates(
            lat=coords.get("lat", -36.8485),
            lon=coords.get("lon", 174.7633),
        ),
        outgoing=LegDefinition(
            leg=Leg.OUTGOING,
            destination=out_data.get("destination", "Bucklands Beach"),
            phrase=out_data.get("phrase", "towards Bucklands Beach"),
            tailwinds=parse_directions(out_data.get("tailwinds", ["NE", "ENE", "E"])),
        ),
        incoming=LegDefinition(
            leg=Leg.INCOMING,
            destination=in_data.get("destination", name),
            phrase=in_data.get("phrase", f"back to {name}"),
            tailwinds=parse_directions(in_data.get("tailwinds", ["SW", "WSW", "W"])),
        ),
        crosswinds=parse_directions(data.get("crosswinds", ["N", "S", "SE", "NW"])),
    )


def default_route() -> Route:
    """Ian Shaw Park to Bucklands Beach."""
    return parse_route({})
