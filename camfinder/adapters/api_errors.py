"""Typed failures raised by the REST adapters.

Adapters raise these; use cases translate them with
:func:`camfinder.usecases.error_mapping.map_api_error`.
"""

from __future__ import annotations

from typing import Any, Optional

# Keys remote services use for a human-readable error text.
_DETAIL_KEYS = ("message", "error", "detail", "title", "hint")
_SNIPPET_LIMIT = 400


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx: bad key, rate limit or rejected query."""


class ApiServerError(ApiError):
    """HTTP 5xx from the remote service."""


class ApiTimeoutError(ApiError):
    """Timeout or connectivity failure before any response arrived."""


class ApiResponseError(ApiError):
    """2xx response whose body does not match the expected schema."""


def error_payload(resp: Any) -> Any:
    """Decoded JSON error body, else a text snippet, else ``None``."""
    try:
        return resp.json()
    except ValueError:
        text = (getattr(resp, "text", "") or "").strip()
        return text[:_SNIPPET_LIMIT] or None


def error_detail(payload: Any) -> Optional[str]:
    """First non-empty message found in an error payload."""
    if isinstance(payload, str):
        return payload.strip() or None
    if isinstance(payload, dict):
        for key in _DETAIL_KEYS:
            found = error_detail(payload.get(key))
            if found:
                return found
    if isinstance(payload, list):
        for item in payload:
            found = error_detail(item)
            if found:
                return found
    return None


def raise_for_status(resp: Any, ctx: str) -> None:
    """Raise the ``ApiError`` subclass matching a non-2xx response."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    payload = error_payload(resp)
    detail = error_detail(payload)
    message = f"{ctx}: {detail} (HTTP {status})" if detail else f"{ctx}: HTTP {status}"
    if 400 <= status < 500:
        error_cls = ApiClientError
    elif 500 <= status < 600:
        error_cls = ApiServerError
    else:
        error_cls = ApiError
    raise error_cls(message, status=status, hint=detail, payload=payload, context=ctx)


def json_body(resp: Any, ctx: str) -> Any:
    """Decode a JSON body or raise ``ApiResponseError``."""
    try:
        return resp.json()
    except ValueError as exc:
        snippet = (getattr(resp, "text", "") or "")[:_SNIPPET_LIMIT]
        raise ApiResponseError(
            f"{ctx}: invalid JSON response", payload=snippet, context=ctx
        ) from exc


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiResponseError",
    "ApiServerError",
    "ApiTimeoutError",
    "error_detail",
    "error_payload",
    "json_body",
    "raise_for_status",
]
