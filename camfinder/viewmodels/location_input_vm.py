from __future__ import annotations

from typing import Callable, Optional

from camfinder.domain.entities import Coordinate
from camfinder.domain.validation import CoordinateInput, validate_coordinate_input

LATITUDE_ERROR_TEXT = "Invalid latitude. Must be between -90 and 90."
LONGITUDE_ERROR_TEXT = "Invalid longitude. Must be between -180 and 180."


class LocationInputVM:
    """Coordinate form state for the location input screen, no I/O here.

    Editing a field clears that field's error flag; only :meth:`validate`
    raises flags again.
    """

    def __init__(self, *, on_change: Optional[Callable[["LocationInputVM"], None]] = None) -> None:
        self.on_change = on_change
        self.latitude_text: str = ""
        self.longitude_text: str = ""
        self.latitude_error: bool = False
        self.longitude_error: bool = False

    @property
    def latitude_error_text(self) -> str:
        return LATITUDE_ERROR_TEXT if self.latitude_error else ""

    @property
    def longitude_error_text(self) -> str:
        return LONGITUDE_ERROR_TEXT if self.longitude_error else ""

    def set_latitude(self, text: object) -> None:
        self.latitude_text = "" if text is None else str(text)
        self.latitude_error = False
        self._notify()

    def set_longitude(self, text: object) -> None:
        self.longitude_text = "" if text is None else str(text)
        self.longitude_error = False
        self._notify()

    def validate(self) -> CoordinateInput:
        """Check both fields and raise the matching error flags."""
        result = validate_coordinate_input(self.latitude_text, self.longitude_text)
        self.latitude_error = result.latitude_error
        self.longitude_error = result.longitude_error
        self._notify()
        return result

    def fill(self, coordinate: Coordinate) -> None:
        """Show an acquired coordinate in the form."""
        self.latitude_text = str(coordinate.latitude)
        self.longitude_text = str(coordinate.longitude)
        self.latitude_error = False
        self.longitude_error = False
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)


__all__ = ["LATITUDE_ERROR_TEXT", "LONGITUDE_ERROR_TEXT", "LocationInputVM"]
