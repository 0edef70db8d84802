"""Rounding and unit helpers shared by the clients and the scoring engine.

Canonical units: wind in km/h, temperature in degrees C, tide height in
meters. Rounding is half-up (2.5 -> 3, 0.25 -> 0.3) everywhere so that
scores and displayed heights do not depend on banker's rounding.
"""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to `digits` decimal places with halves rounded up."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_to_tenth(value: float) -> float:
    """Round a height to the nearest 0.1."""
    return round_half_up(value, 1)


def m_s_to_kmh(speed_m_s: float) -> int:
    """Convert m/s to whole km/h."""
    return int(round_half_up(speed_m_s * 3.6))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a value to [low, high]."""
    return max(low, min(high, value))
