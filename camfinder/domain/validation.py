from __future__ import annotations

"""Validation of manually entered coordinates."""

import math
from dataclasses import dataclass
from typing import Optional

from .entities import Coordinate

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class CoordinateInput:
    """Outcome of validating a latitude/longitude text pair.

    Both flags are computed independently; ``coordinate`` is only set when
    neither flag is raised.
    """

    coordinate: Optional[Coordinate]
    latitude_error: bool = False
    longitude_error: bool = False

    @property
    def ok(self) -> bool:
        return self.coordinate is not None


def parse_degrees(text: object, bounds: tuple[float, float]) -> Optional[float]:
    """Parse ``text`` as a finite real number within ``bounds`` (inclusive)."""
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        raw = str(text or "").strip()
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    low, high = bounds
    if value < low or value > high:
        return None
    return value


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    return (
        parse_degrees(latitude, LATITUDE_RANGE) is not None
        and parse_degrees(longitude, LONGITUDE_RANGE) is not None
    )


def validate_coordinate_input(latitude_text: object, longitude_text: object) -> CoordinateInput:
    latitude = parse_degrees(latitude_text, LATITUDE_RANGE)
    longitude = parse_degrees(longitude_text, LONGITUDE_RANGE)
    if latitude is None or longitude is None:
        return CoordinateInput(
            coordinate=None,
            latitude_error=latitude is None,
            longitude_error=longitude is None,
        )
    return CoordinateInput(coordinate=Coordinate(latitude, longitude))


__all__ = [
    "CoordinateInput",
    "LATITUDE_RANGE",
    "LONGITUDE_RANGE",
    "is_valid_coordinate",
    "parse_degrees",
    "validate_coordinate_input",
]
