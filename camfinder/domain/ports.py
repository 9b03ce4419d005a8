from __future__ import annotations
from typing import Callable, Optional, Protocol

from .entities import LocationFix, PermissionStatus, WebcamCatalog


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


FixListener = Callable[[Optional[LocationFix]], None]
FailureListener = Callable[[BaseException], None]


# ---- Ports (Hexagonal boundaries) ----
class LocationPort(Protocol):
    """Device location provider plus its permission mechanism.

    ``last_known_location`` returns immediately; exactly one of the two
    listeners is expected to fire later, possibly from another thread.
    ``on_success(None)`` means the provider has no cached fix.
    """

    def permission_status(self) -> PermissionStatus: ...
    def request_permission(self) -> None: ...
    def last_known_location(
        self, on_success: FixListener, on_failure: FailureListener
    ) -> None: ...


class WebcamCatalogPort(Protocol):
    """Remote webcam search around a coordinate (blocking call)."""

    def fetch(self, latitude: float, longitude: float) -> WebcamCatalog: ...


class UrlOpenerPort(Protocol):
    """Hands an external link over to the user's browser."""

    def open(self, url: str) -> None: ...
