"""Use case producing the device's current coordinate.

The location port reports through a success/failure listener pair that may
fire on any thread. This module turns that into a single awaitable which
resolves exactly once on the caller's event loop, whatever the listeners do.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple, Union

from camfinder.domain.entities import Coordinate, LocationFix, Unavailable
from camfinder.domain.ports import LocationPort
from camfinder.domain.validation import is_valid_coordinate

_log = logging.getLogger(__name__)

AcquireResult = Union[Coordinate, type(Unavailable)]

# Reasons recorded in ``AcquireCoordinate.last_reason``.
PERMISSION_REQUESTED = "permission_requested"
NO_FIX = "no_fix"
FAILED = "failed"
TIMED_OUT = "timed_out"
OUT_OF_RANGE = "out_of_range"

_Outcome = Tuple[str, Any]


class _OneShotListeners:
    """Listener pair that settles one future on its owning loop.

    Every listener call is re-dispatched with ``call_soon_threadsafe``; the
    first one to run settles the future and later ones only get counted.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, future: "asyncio.Future[_Outcome]") -> None:
        self._loop = loop
        self._future = future
        self.ignored = 0

    def on_success(self, fix: Optional[LocationFix]) -> None:
        self._dispatch(("fix", fix))

    def on_failure(self, exc: BaseException) -> None:
        self._dispatch(("error", exc))

    def _dispatch(self, outcome: _Outcome) -> None:
        try:
            self._loop.call_soon_threadsafe(self._settle, outcome)
        except RuntimeError:
            # Loop already closed: the caller is gone.
            _log.debug("Dropping location callback for closed loop")

    def _settle(self, outcome: _Outcome) -> None:
        if self._future.done():
            self.ignored += 1
            _log.debug("Ignoring extra location callback (%s)", outcome[0])
            return
        self._future.set_result(outcome)


class AcquireCoordinate:
    """Use-case callable: permission check plus one last-known-location query.

    Returns a :class:`Coordinate` or ``Unavailable``; never raises for
    provider failures. When permission is missing the request is issued and
    ``Unavailable`` is returned right away; callers retry after the user
    answers.
    """

    def __init__(self, location_port: LocationPort, *, timeout_s: Optional[float] = 10.0) -> None:
        self.location_port = location_port
        self.timeout_s = timeout_s
        self.last_reason: Optional[str] = None

    async def __call__(self) -> AcquireResult:
        return await self.acquire()

    async def acquire(self) -> AcquireResult:
        status = self.location_port.permission_status()
        if not status.granted:
            _log.warning("Location permission not granted; requesting access")
            self.location_port.request_permission()
            return self._unavailable(PERMISSION_REQUESTED)

        loop = asyncio.get_running_loop()
        future: "asyncio.Future[_Outcome]" = loop.create_future()
        listeners = _OneShotListeners(loop, future)
        try:
            self.location_port.last_known_location(listeners.on_success, listeners.on_failure)
        except Exception as exc:
            listeners.on_failure(exc)

        try:
            kind, value = await asyncio.wait_for(future, self.timeout_s)
        except asyncio.TimeoutError:
            _log.warning("Location lookup timed out after %ss", self.timeout_s)
            return self._unavailable(TIMED_OUT)

        if kind == "error":
            _log.warning("Error retrieving location: %s", value)
            return self._unavailable(FAILED)
        if value is None:
            _log.warning("Unable to fetch location: provider has no recent fix")
            return self._unavailable(NO_FIX)
        if not is_valid_coordinate(value.latitude, value.longitude):
            _log.warning("Discarding out-of-range fix %s,%s", value.latitude, value.longitude)
            return self._unavailable(OUT_OF_RANGE)

        coordinate = Coordinate(value.latitude, value.longitude)
        _log.info("Current location: %s", coordinate)
        self.last_reason = None
        return coordinate

    def _unavailable(self, reason: str) -> AcquireResult:
        self.last_reason = reason
        return Unavailable


__all__ = [
    "AcquireCoordinate",
    "AcquireResult",
    "FAILED",
    "NO_FIX",
    "OUT_OF_RANGE",
    "PERMISSION_REQUESTED",
    "TIMED_OUT",
]
