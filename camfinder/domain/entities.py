from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Coordinate:
    """Geographic position in decimal degrees.

    The type does not enforce ranges; input boundaries validate before a
    coordinate enters the navigation state machine.
    """

    latitude: float
    """Latitude in degrees, valid range [-90, 90]."""
    longitude: float
    """Longitude in degrees, valid range [-180, 180]."""

    def __post_init__(self) -> None:
        if isinstance(self.latitude, bool) or not isinstance(self.latitude, (int, float)):
            raise TypeError("Coordinate.latitude must be a real number.")
        if isinstance(self.longitude, bool) or not isinstance(self.longitude, (int, float)):
            raise TypeError("Coordinate.longitude must be a real number.")
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))

    def __str__(self) -> str:
        return f"{self.latitude}, {self.longitude}"


@dataclass(frozen=True)
class LocationFix:
    """Raw position reported by a location provider before validation."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class PermissionStatus:
    """Snapshot of the location permissions currently held by the process."""

    fine: bool = False
    """Precise (GPS-grade) location access."""
    coarse: bool = False
    """Approximate (network/IP-grade) location access."""

    @property
    def granted(self) -> bool:
        """Either grant is sufficient for a last-known-location query."""
        return self.fine or self.coarse


@dataclass(frozen=True)
class WebcamLocation:
    """Human-readable place a webcam is installed at."""

    city: str = ""
    country: str = ""

    def __str__(self) -> str:
        return ", ".join(part for part in (self.city, self.country) if part)


@dataclass(frozen=True)
class WebcamLinks:
    """External pages for a webcam."""

    viewer_url: str = ""
    """Catalog page showing the live image (Windy detail page)."""
    provider_url: str = ""
    """Page of the organisation operating the webcam."""


@dataclass(frozen=True)
class WebcamSummary:
    """One catalog entry as returned by the webcam search."""

    id: int
    """Catalog identifier, unique within one response."""
    title: str
    location: WebcamLocation
    links: WebcamLinks

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError("WebcamSummary.id must be an integer.")
        if self.id < 0:
            raise ValueError("WebcamSummary.id must be non-negative.")
        if not isinstance(self.title, str):
            raise TypeError("WebcamSummary.title must be a string.")


WebcamCatalog = Tuple[WebcamSummary, ...]


class _Unavailable:
    """Sentinel returned when no coordinate could be acquired."""

    _instance: "_Unavailable | None" = None

    def __new__(cls) -> "_Unavailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Unavailable"

    def __bool__(self) -> bool:
        return False


Unavailable = _Unavailable()


def find_webcam(catalog: WebcamCatalog, webcam_id: int) -> WebcamSummary | None:
    """Return the first entry whose id matches ``webcam_id``."""
    for webcam in catalog:
        if webcam.id == webcam_id:
            return webcam
    return None


__all__ = [
    "Coordinate",
    "LocationFix",
    "PermissionStatus",
    "Unavailable",
    "WebcamCatalog",
    "WebcamLinks",
    "WebcamLocation",
    "WebcamSummary",
    "find_webcam",
]
