"""Runtime orchestration for the NiceGUI webcam browser.

This module composes settings, the app controller and per-client navigation
sessions. It does not import NiceGUI so it can be exercised without a server.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Dict, List, Optional

from camfinder.adapters.location_ip import PermissionGate
from camfinder.adapters.location_mock import LocationMock
from camfinder.app.controller import AppController
from camfinder.app.navigation import NavigationController
from camfinder.domain.entities import LocationFix
from camfinder.domain.ports import LocationPort, UrlOpenerPort
from camfinder.viewmodels.location_input_vm import LocationInputVM
from camfinder.viewmodels.screen_vm import ScreenVM
from camfinder.viewmodels.settings_vm import SettingsVM


LOGGER = logging.getLogger(__name__)

# Fix reported by --mock-location (Boise, Idaho).
MOCK_FIX = LocationFix(latitude=43.615, longitude=-116.2023)

PERMISSION_GRANTED_TEXT = "Location access granted. Press 'Use Current Location' again."
PERMISSION_DENIED_TEXT = "Location permissions denied"


@dataclass
class BrowserSession:
    """Per-client state: navigation machine, form, rendered DTO and permission."""

    navigation: NavigationController
    input_vm: LocationInputVM
    screen_vm: ScreenVM
    permission_gate: Optional[PermissionGate] = None
    notices: List[str] = field(default_factory=list)


class WebRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(
        self,
        settings_vm: Optional[SettingsVM] = None,
        *,
        location_port: Optional[LocationPort] = None,
    ) -> None:
        self.status_message = "Ready."
        self.settings_vm = settings_vm or SettingsVM()
        self.controller = AppController(self.settings_vm, location_port=location_port)

    @classmethod
    def with_mock_location(cls, settings_vm: Optional[SettingsVM] = None) -> "WebRuntime":
        return cls(settings_vm, location_port=LocationMock(fix=MOCK_FIX, threaded=True, delay_s=0.2))

    def ensure_adapter(self) -> bool:
        if self.controller.ensure_ready():
            return True
        self.status_message = "Set a Windy API key (CAMFINDER_API_KEY or --api-key) first."
        return False

    def open_session(
        self,
        *,
        on_notice: Callable[[str], None],
        on_render: Callable[[Dict], None],
        on_busy: Optional[Callable[[bool], None]] = None,
        url_opener: Optional[UrlOpenerPort] = None,
        on_permission_prompt: Optional[Callable[[], None]] = None,
    ) -> BrowserSession:
        """Create the navigation session for one connected browser client.

        Permission prompts raised by this session reach only
        ``on_permission_prompt``, and answers given through
        :meth:`resolve_permission` apply only to this session.
        """
        input_vm = LocationInputVM()
        screen_vm = ScreenVM(on_render=on_render)
        session_notices: List[str] = []

        def _notice(message: str) -> None:
            session_notices.append(message)
            on_notice(message)

        location = self.controller.session_location(on_permission_prompt)
        navigation = self.controller.build_navigation(
            location_port=location,
            on_notice=_notice,
            on_busy=on_busy,
            input_vm=input_vm,
            url_opener=url_opener,
        )
        navigation.subscribe(screen_vm.apply_state)
        screen_vm.apply_state(navigation.state)
        LOGGER.debug("Opened browser session")
        return BrowserSession(
            navigation=navigation,
            input_vm=input_vm,
            screen_vm=screen_vm,
            permission_gate=getattr(location, "gate", None),
            notices=session_notices,
        )

    def resolve_permission(self, session: BrowserSession, granted: bool) -> None:
        """Record one session's answer to its permission prompt and tell the user."""
        if session.permission_gate is not None:
            session.permission_gate.resolve(granted)
        session.navigation.on_notice(PERMISSION_GRANTED_TEXT if granted else PERMISSION_DENIED_TEXT)

    def close(self) -> None:
        self.controller.close()
