"""Adapter and use-case wiring for the webcam browser runtime.

This module owns lazy construction of the concrete adapters that depend on
values in :class:`camfinder.viewmodels.settings_vm.SettingsVM`. Transports
(HTTP sessions, the location worker) are shared by the whole process;
permission state and the location use case belong to one navigation session.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.location_ip import IpLocationAdapter, PermissionGate, PromptFn
from ..adapters.url_opener import BrowserUrlOpener
from ..adapters.windy_rest import WindyWebcamAdapter
from ..domain.ports import LocationPort, UrlOpenerPort
from ..usecases.acquire_coordinate import AcquireCoordinate
from ..usecases.load_webcam_catalog import LoadWebcamCatalog
from ..viewmodels.location_input_vm import LocationInputVM
from .navigation import BusyFn, NavigationController, NoticeFn


class AppController:
    """Create and cache runtime adapters from settings state.

    Call chain:
        ``camfinder.web_ui.runtime.WebRuntime`` creates one instance, asks
        ``session_location`` for each browser client and passes the result to
        ``build_navigation``.
    """

    def __init__(
        self,
        settings_vm,
        *,
        location_port: Optional[LocationPort] = None,
        url_opener: Optional[UrlOpenerPort] = None,
    ) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings state with API key, URLs and timeouts.
            location_port: Location provider override (mock or test double),
                shared by every session. Defaults to an
                :class:`IpLocationAdapter` bound to a gate per session.
            url_opener: Link opener override; defaults to the system browser.
        """
        self.settings_vm = settings_vm
        self._location_override = location_port
        self._url_opener = url_opener
        self._catalog_adapter: Optional[WindyWebcamAdapter] = None
        self._location_adapter: Optional[LocationPort] = None
        self.uc_load: Optional[LoadWebcamCatalog] = None

    @property
    def catalog_adapter(self) -> Optional[WindyWebcamAdapter]:
        return self._catalog_adapter

    @property
    def location_adapter(self) -> Optional[LocationPort]:
        return self._location_adapter

    def close(self) -> None:
        """Stop the shared location worker; call once at process shutdown."""
        if isinstance(self._location_adapter, IpLocationAdapter):
            self._location_adapter.close()

    def ensure_ready(self) -> bool:
        """Ensure the shared adapters and the catalog use case exist.

        Returns:
            ``True`` when dependencies are available, ``False`` when the
            webcam API key is missing from settings.
        """
        if self._catalog_adapter and self._location_adapter and self.uc_load:
            return True
        if not self.settings_vm.is_valid():
            return False

        if self._catalog_adapter is None:
            self._catalog_adapter = WindyWebcamAdapter(
                self.settings_vm.api_key,
                base_url=self.settings_vm.api_base_url,
                request_timeout_s=self.settings_vm.request_timeout_s,
            )
            self.uc_load = LoadWebcamCatalog(self._catalog_adapter)

        if self._location_adapter is None:
            self._location_adapter = self._location_override or IpLocationAdapter(
                url=self.settings_vm.ip_location_url,
                request_timeout_s=self.settings_vm.request_timeout_s,
            )
        return True

    def session_location(self, prompt: Optional[PromptFn] = None) -> LocationPort:
        """Location port for one session.

        The IP adapter is rebound to a fresh :class:`PermissionGate` whose
        prompt reaches only that session; overrides are returned unchanged.

        Raises:
            RuntimeError: If settings lack the webcam API key.
        """
        self._require_ready()
        if isinstance(self._location_adapter, IpLocationAdapter):
            return self._location_adapter.with_gate(PermissionGate(prompt=prompt))
        return self._location_adapter

    def build_navigation(
        self,
        *,
        location_port: Optional[LocationPort] = None,
        on_notice: Optional[NoticeFn] = None,
        on_busy: Optional[BusyFn] = None,
        input_vm: Optional[LocationInputVM] = None,
        url_opener: Optional[UrlOpenerPort] = None,
    ) -> NavigationController:
        """Return a fresh navigation state machine with its own location use case.

        Args:
            location_port: Port from ``session_location``; a new one without
                a permission prompt is made when omitted.
            on_notice: Sink for transient user notices.
            on_busy: Called with ``True``/``False`` when requests start/finish.
            input_vm: Form state to bind; a new one is created when omitted.
            url_opener: Per-session link opener, e.g. one that opens a new
                browser tab for the requesting client.

        Raises:
            RuntimeError: If settings lack the webcam API key.
        """
        self._require_ready()
        acquire = AcquireCoordinate(
            location_port or self.session_location(),
            timeout_s=self.settings_vm.location_timeout_s,
        )
        return NavigationController(
            acquire=acquire,
            load=self.uc_load,
            url_opener=url_opener or self._url_opener or BrowserUrlOpener(),
            input_vm=input_vm,
            on_notice=on_notice,
            on_busy=on_busy,
        )

    def _require_ready(self) -> None:
        if not self.ensure_ready():
            raise RuntimeError("Webcam API key missing; set CAMFINDER_API_KEY or pass --api-key.")
