"""Shared ``requests`` transport for the REST adapters.

Both the webcam catalog adapter and the IP location adapter go through
:class:`RetryingSession`, so timeouts, attempt count and the API-key header
are decided in one place. Status handling stays with the adapters
(:func:`camfinder.adapters.api_errors.raise_for_status`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from camfinder.adapters.api_errors import ApiError, ApiTimeoutError


@dataclass
class HttpConfig:
    """Transport settings.

    Attributes:
        request_timeout_s: Per-request timeout in seconds.
        retries: Extra attempts after a timeout or connection failure.
        api_key_header: Header carrying the API key, when one is set.
    """

    request_timeout_s: float = 10
    retries: int = 0
    api_key_header: str = "X-API-Key"


class RetryingSession:
    """GET-only wrapper around one persistent ``requests.Session``."""

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.api_key:
            headers[self.cfg.api_key_header] = self.api_key
        return headers

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Return the first response received, whatever its status.

        Raises:
            ApiTimeoutError: Every attempt timed out or failed to connect.
            ApiError: Any other transport failure (not retried).
        """
        context = f"GET {url}"
        headers = self._headers(accept=accept)
        effective_timeout = timeout or self.cfg.request_timeout_s
        for attempt in range(max(0, self.cfg.retries) + 1):
            try:
                return self.session.get(url, params=params, headers=headers, timeout=effective_timeout)
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                failure = exc
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        raise ApiTimeoutError(
            f"Timeout contacting {url} after {attempt + 1} attempt(s)", context=context
        ) from failure


__all__ = ["HttpConfig", "RetryingSession"]
