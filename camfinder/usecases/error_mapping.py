"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from camfinder.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiResponseError,
    ApiServerError,
    ApiTimeoutError,
    error_detail,
)
from camfinder.domain.ports import UseCaseError

# Client statuses with a fixed user text.
_CLIENT_STATUS_ERRORS = {
    401: ("AUTH_FAILED", "Auth failed / API key invalid."),
    403: ("AUTH_FAILED", "Auth failed / API key invalid."),
    429: ("RATE_LIMITED", "Too many requests. Try again later."),
}


def map_api_error(
    exc: BaseException,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map an adapter exception to a stable ``UseCaseError`` code.

    Args:
        exc: Exception raised by an adapter or port implementation.
        default_code: Code for exceptions outside the ``ApiError`` family.
        default_message: Message for those exceptions; falls back to
            ``str(exc)``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiResponseError):
        return UseCaseError("INVALID_RESPONSE", "Webcam service returned an unexpected response.")
    if isinstance(exc, ApiClientError):
        return _client_error(exc)
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Webcam service error, try again.")
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))
    return UseCaseError(default_code, default_message or str(exc) or "Unexpected error.")


def _client_error(exc: ApiClientError) -> UseCaseError:
    status = exc.status or 0
    if status in _CLIENT_STATUS_ERRORS:
        return UseCaseError(*_CLIENT_STATUS_ERRORS[status])
    label = f"Request failed (HTTP {status})" if status else "Request failed"
    hint = (exc.hint or error_detail(exc.payload) or "").strip()
    return UseCaseError("REQUEST_FAILED", f"{label}: {hint}" if hint else f"{label}.")


__all__ = ["map_api_error"]
