"""Sixteen-point compass directions.

Wind directions arrive either as degrees (OpenWeatherMap) or as compass
abbreviations (config, fixtures). Everything downstream works with
CompassDirection so that per-leg wind tables can cover every point.
"""

from enum import Enum
from typing import Union

from src.core.units import round_half_up


class CompassDirection(Enum):
    """A 16-point compass direction (where the wind comes FROM)."""
    N = "N"
    NNE = "NNE"
    NE = "NE"
    ENE = "ENE"
    E = "E"
    ESE = "ESE"
    SE = "SE"
    SSE = "SSE"
    S = "S"
    SSW = "SSW"
    SW = "SW"
    WSW = "WSW"
    W = "W"
    WNW = "WNW"
    NW = "NW"
    NNW = "NNW"

    @property
    def degrees(self) -> float:
        """Bearing in degrees (N = 0, clockwise)."""
        return _ORDER.index(self) * 22.5

    @classmethod
    def from_degrees(cls, degrees: float) -> "CompassDirection":
        """Convert a bearing to the nearest compass point.

        Args:
            degrees: Bearing in degrees, any real value

        Returns:
            Nearest of the 16 compass points
        """
        index = int(round_half_up(degrees / 22.5)) % 16
        return _ORDER[index]

    @classmethod
    def parse(cls, value: Union[str, "CompassDirection"]) -> "CompassDirection":
        """Parse a compass abbreviation such as "ne" or "WSW"."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown compass direction: {value!r}") from None

    def __str__(self) -> str:
        return self.value


_ORDER = list(CompassDirection)
