"""Screen state machine of the webcam browser.

``NavigationController`` owns the single current :data:`ScreenState` and is
the only object that replaces it. Presenters read ``state`` and call the
intent methods; asynchronous intents must be awaited on the event loop that
owns the controller, which is the interaction thread.

Each location/catalog request takes a generation token. Going back or
starting another request advances the generation, and a completion whose
token is no longer current is dropped instead of applied.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional

from camfinder.domain.entities import Coordinate, WebcamCatalog, find_webcam
from camfinder.domain.ports import UrlOpenerPort, UseCaseError
from camfinder.domain.screen_state import (
    LocationInput,
    ScreenState,
    WebcamDetail,
    WebcamList,
    state_name,
    unreachable_state,
)
from camfinder.usecases.acquire_coordinate import PERMISSION_REQUESTED
from camfinder.viewmodels.location_input_vm import LocationInputVM

StateListener = Callable[[ScreenState], None]
NoticeFn = Callable[[str], None]
BusyFn = Callable[[bool], None]
AcquireFn = Callable[[], Awaitable[Any]]
LoadFn = Callable[[Coordinate], Awaitable[WebcamCatalog]]

LOCATION_UNAVAILABLE_TEXT = "Unable to determine current location. Try again later."
PERMISSION_REQUESTED_TEXT = "Location permission requested. Try again after granting access."
NO_BROWSER_TEXT = "Opening links is not supported here."


def _noop_notice(_: str) -> None:
    """Default notice sink."""


class NavigationController:
    """Three-screen state machine: LocationInput -> List -> Detail."""

    def __init__(
        self,
        *,
        acquire: AcquireFn,
        load: LoadFn,
        url_opener: Optional[UrlOpenerPort] = None,
        input_vm: Optional[LocationInputVM] = None,
        on_notice: Optional[NoticeFn] = None,
        on_busy: Optional[BusyFn] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self._acquire = acquire
        self._load = load
        self.url_opener = url_opener
        self.input_vm = input_vm or LocationInputVM()
        self.on_notice: NoticeFn = on_notice or _noop_notice
        self.on_busy = on_busy
        self._state: ScreenState = LocationInput()
        self._listeners: List[StateListener] = []
        self._generation = 0
        self._in_flight = 0

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------
    @property
    def state(self) -> ScreenState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a location or catalog request is outstanding."""
        return self._in_flight > 0

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` after every transition; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    async def submit_coordinate(
        self,
        latitude_text: Optional[str] = None,
        longitude_text: Optional[str] = None,
    ) -> bool:
        """Validate the form and load the catalog for it.

        Text arguments replace the form fields first. Returns ``True`` when
        the List screen was entered.
        """
        if not isinstance(self._state, LocationInput):
            self._log.debug("submit ignored on %s", state_name(self._state))
            return False
        if latitude_text is not None:
            self.input_vm.set_latitude(latitude_text)
        if longitude_text is not None:
            self.input_vm.set_longitude(longitude_text)

        result = self.input_vm.validate()
        if not result.ok:
            self._log.info(
                "Rejected coordinate input (latitude_error=%s, longitude_error=%s)",
                result.latitude_error,
                result.longitude_error,
            )
            return False
        return await self._load_catalog(result.coordinate)

    async def use_current_location(self) -> bool:
        """Acquire the device position and search around it."""
        if not isinstance(self._state, LocationInput):
            self._log.debug("current-location ignored on %s", state_name(self._state))
            return False

        token = self._advance()
        # Busy spans the acquisition and the catalog load that follows it.
        self._begin()
        try:
            outcome = await self._acquire()
            # last_reason belongs to this call: each session owns its use case.
            reason = getattr(self._acquire, "last_reason", None)

            if self._is_stale(token):
                self._log.debug("Dropping stale location result (generation %s)", token)
                return False
            if not isinstance(outcome, Coordinate):
                if reason == PERMISSION_REQUESTED:
                    self._notice(PERMISSION_REQUESTED_TEXT)
                else:
                    self._notice(LOCATION_UNAVAILABLE_TEXT)
                return False

            self.input_vm.fill(outcome)
            return await self._load_catalog(outcome)
        finally:
            self._end()

    def select_webcam(self, webcam_id: int) -> bool:
        """Open the detail screen for the first catalog entry with ``webcam_id``."""
        state = self._state
        if not isinstance(state, WebcamList):
            self._log.debug("select ignored on %s", state_name(state))
            return False
        selected = find_webcam(state.catalog, webcam_id)
        if selected is None:
            self._log.debug("No webcam with id %s in current catalog", webcam_id)
            return False
        self._set_state(WebcamDetail(selected=selected, catalog=state.catalog))
        return True

    def go_back(self) -> bool:
        """Step back one screen; ``False`` on LocationInput (host decides)."""
        state = self._state
        if isinstance(state, LocationInput):
            return False
        if isinstance(state, WebcamList):
            self._advance()
            self._set_state(LocationInput())
            return True
        if isinstance(state, WebcamDetail):
            self._set_state(WebcamList(catalog=state.catalog))
            return True
        unreachable_state(state)

    def open_url(self, url: str) -> None:
        if self.url_opener is None:
            self._notice(NO_BROWSER_TEXT)
            return
        try:
            self.url_opener.open(url)
        except Exception as exc:
            self._log.warning("Could not open %r: %s", url, exc)
            self._notice(str(exc) or NO_BROWSER_TEXT)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _load_catalog(self, coordinate: Coordinate) -> bool:
        token = self._advance()
        self._begin()
        try:
            catalog = await self._load(coordinate)
        except UseCaseError as err:
            if self._is_stale(token):
                self._log.debug("Dropping stale load failure (generation %s)", token)
            else:
                self._notice(err.message)
            return False
        finally:
            self._end()

        if self._is_stale(token):
            self._log.debug("Dropping stale catalog for %s (generation %s)", coordinate, token)
            return False
        self._set_state(WebcamList(catalog=catalog))
        return True

    def _begin(self) -> None:
        self._in_flight += 1
        if self._in_flight == 1 and self.on_busy:
            self.on_busy(True)

    def _end(self) -> None:
        self._in_flight -= 1
        if self._in_flight == 0 and self.on_busy:
            self.on_busy(False)

    def _advance(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, token: int) -> bool:
        return token != self._generation or not isinstance(self._state, LocationInput)

    def _set_state(self, new_state: ScreenState) -> None:
        self._log.info("Screen %s -> %s", state_name(self._state), state_name(new_state))
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def _notice(self, message: str) -> None:
        self._log.info("Notice: %s", message)
        self.on_notice(message)


__all__ = [
    "LOCATION_UNAVAILABLE_TEXT",
    "NavigationController",
    "PERMISSION_REQUESTED_TEXT",
]
