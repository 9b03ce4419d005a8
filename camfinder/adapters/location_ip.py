"""IP-geolocation backed location provider for desktop and browser sessions.

A desktop process has no OS location service, so the "last known location"
is the approximate position of the public IP address. Access is guarded by an
in-memory :class:`PermissionGate`; the web UI registers a prompt callback that
asks the user and answers through :meth:`PermissionGate.resolve`.

Dependencies:
    - ``requests`` via :class:`camfinder.adapters.http_client.RetryingSession`.
    - ``concurrent.futures.ThreadPoolExecutor`` for the off-loop lookup.
"""

from __future__ import annotations

import copy
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional

from camfinder.domain.entities import LocationFix, PermissionStatus
from camfinder.domain.ports import FailureListener, FixListener, LocationPort

from .api_errors import ApiResponseError, json_body, raise_for_status
from .http_client import HttpConfig, RetryingSession

DEFAULT_IP_LOCATION_URL = "http://ip-api.com/json/"

_log = logging.getLogger(__name__)

PromptFn = Callable[[], None]


class PermissionGate:
    """Process-local location permission state.

    Permission is never persisted; each session starts without a grant.
    """

    def __init__(
        self,
        *,
        fine: bool = False,
        coarse: bool = False,
        prompt: Optional[PromptFn] = None,
    ) -> None:
        self._status = PermissionStatus(fine=fine, coarse=coarse)
        self._prompt = prompt
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def status(self) -> PermissionStatus:
        return self._status

    def request(self) -> None:
        """Ask the user for access; a request already on screen is not repeated."""
        if self._pending:
            _log.debug("Location permission request already pending")
            return
        if self._prompt is None:
            _log.warning("No permission prompt registered; location access stays denied")
            return
        self._pending = True
        self._prompt()

    def resolve(self, granted: bool, *, precise: bool = False) -> None:
        """Record the user's answer to the last request."""
        self._pending = False
        if granted:
            self._status = PermissionStatus(fine=precise, coarse=True)
            _log.info("Location permission granted")
        else:
            self._status = PermissionStatus()
            _log.warning("Location permission denied")


class IpLocationAdapter(LocationPort):
    """Location port answering with the approximate position of the public IP."""

    def __init__(
        self,
        gate: Optional[PermissionGate] = None,
        *,
        url: str = DEFAULT_IP_LOCATION_URL,
        request_timeout_s: float = 5,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.gate = gate or PermissionGate()
        self.url = url
        self.session = RetryingSession(None, HttpConfig(request_timeout_s=request_timeout_s))
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ip-location"
        )

    def with_gate(self, gate: PermissionGate) -> "IpLocationAdapter":
        """Copy bound to ``gate`` that shares this adapter's session and worker."""
        bound = copy.copy(self)
        bound.gate = gate
        return bound

    def permission_status(self) -> PermissionStatus:
        return self.gate.status()

    def request_permission(self) -> None:
        self.gate.request()

    def last_known_location(
        self, on_success: FixListener, on_failure: FailureListener
    ) -> None:
        self._executor.submit(self._deliver, on_success, on_failure)

    def lookup(self) -> Optional[LocationFix]:
        """Blocking lookup; ``None`` when the service has no position for us."""
        ctx = "ip-location"
        resp = self.session.get(self.url, params={"fields": "status,message,lat,lon"})
        raise_for_status(resp, ctx)
        data = json_body(resp, ctx)
        if not isinstance(data, Mapping):
            raise ApiResponseError(f"{ctx}: expected object response", payload=data, context=ctx)
        if data.get("status") != "success":
            _log.info("IP location lookup returned no fix: %s", data.get("message") or data.get("status"))
            return None
        latitude = self._number(data.get("lat"), ctx=ctx)
        longitude = self._number(data.get("lon"), ctx=ctx)
        return LocationFix(latitude=latitude, longitude=longitude)

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    def _deliver(self, on_success: FixListener, on_failure: FailureListener) -> None:
        try:
            fix = self.lookup()
        except Exception as exc:
            on_failure(exc)
            return
        on_success(fix)

    @staticmethod
    def _number(value: Any, *, ctx: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ApiResponseError(f"{ctx}: missing coordinates", payload=value, context=ctx)
        number = float(value)
        if not math.isfinite(number):
            raise ApiResponseError(f"{ctx}: missing coordinates", payload=value, context=ctx)
        return number


__all__ = ["DEFAULT_IP_LOCATION_URL", "IpLocationAdapter", "PermissionGate", "PromptFn"]
