from __future__ import annotations

import pytest
from requests import exceptions as req_exc

from camfinder.adapters.api_errors import ApiError, ApiTimeoutError
from camfinder.adapters.http_client import HttpConfig, RetryingSession


class _RaisingSession:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    def get(self, *args, **kwargs):
        self.calls += 1
        raise self.exc


def test_timeouts_are_retried_then_raised_as_timeout_error() -> None:
    session = RetryingSession(None, HttpConfig(retries=2))
    stub = _RaisingSession(req_exc.ConnectTimeout("slow"))
    session.session = stub

    with pytest.raises(ApiTimeoutError):
        session.get("https://api.example/webcams")

    assert stub.calls == 3


def test_other_request_failures_are_not_retried() -> None:
    session = RetryingSession(None, HttpConfig(retries=2))
    stub = _RaisingSession(req_exc.InvalidURL("bad url"))
    session.session = stub

    with pytest.raises(ApiError) as excinfo:
        session.get("nonsense")

    assert not isinstance(excinfo.value, ApiTimeoutError)
    assert stub.calls == 1


def test_api_key_header_only_sent_when_configured() -> None:
    keyed = RetryingSession("k", HttpConfig(api_key_header="x-windy-api-key"))
    anonymous = RetryingSession(None, HttpConfig())

    assert keyed._headers()["x-windy-api-key"] == "k"
    assert anonymous._headers() == {"Accept": "application/json"}
