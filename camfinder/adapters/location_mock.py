from __future__ import annotations

import threading
from typing import Optional

from camfinder.domain.entities import LocationFix, PermissionStatus
from camfinder.domain.ports import FailureListener, FixListener, LocationPort


class LocationMock(LocationPort):
    """In-memory location provider used for tests and offline development.

    ``threaded`` delivers listeners from a worker thread after ``delay_s``,
    mimicking a platform callback.
    """

    def __init__(
        self,
        *,
        fix: Optional[LocationFix] = None,
        error: Optional[BaseException] = None,
        permission: PermissionStatus = PermissionStatus(coarse=True),
        grant_on_request: bool = False,
        threaded: bool = False,
        delay_s: float = 0.0,
        silent: bool = False,
    ) -> None:
        self.fix = fix
        self.error = error
        self.permission = permission
        self.grant_on_request = grant_on_request
        self.threaded = threaded
        self.delay_s = delay_s
        self.silent = silent
        self.status_queries = 0
        self.permission_requests = 0
        self.location_queries = 0

    def permission_status(self) -> PermissionStatus:
        self.status_queries += 1
        return self.permission

    def request_permission(self) -> None:
        self.permission_requests += 1
        if self.grant_on_request:
            self.permission = PermissionStatus(fine=True, coarse=True)

    def last_known_location(
        self, on_success: FixListener, on_failure: FailureListener
    ) -> None:
        self.location_queries += 1
        if self.silent:
            # Never answers; exercises caller timeouts.
            return
        if self.threaded:
            timer = threading.Timer(self.delay_s, self._deliver, args=(on_success, on_failure))
            timer.daemon = True
            timer.start()
            return
        self._deliver(on_success, on_failure)

    def _deliver(self, on_success: FixListener, on_failure: FailureListener) -> None:
        if self.error is not None:
            on_failure(self.error)
        else:
            on_success(self.fix)
