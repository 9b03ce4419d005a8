"""Domain package exports for value objects, screen states and validation."""

from .entities import (
    Coordinate,
    LocationFix,
    PermissionStatus,
    Unavailable,
    WebcamCatalog,
    WebcamLinks,
    WebcamLocation,
    WebcamSummary,
    find_webcam,
)
from .screen_state import (
    LocationInput,
    ScreenState,
    WebcamDetail,
    WebcamList,
    state_name,
    unreachable_state,
)
from .validation import CoordinateInput, validate_coordinate_input

__all__ = [
    "Coordinate",
    "CoordinateInput",
    "LocationFix",
    "LocationInput",
    "PermissionStatus",
    "ScreenState",
    "Unavailable",
    "WebcamCatalog",
    "WebcamDetail",
    "WebcamLinks",
    "WebcamList",
    "WebcamLocation",
    "WebcamSummary",
    "find_webcam",
    "state_name",
    "unreachable_state",
    "validate_coordinate_input",
]
