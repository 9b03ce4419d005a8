from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from camfinder.domain.entities import (
    WebcamCatalog,
    WebcamLinks,
    WebcamLocation,
    WebcamSummary,
)
from camfinder.domain.ports import WebcamCatalogPort

from .api_errors import ApiResponseError, json_body, raise_for_status
from .http_client import HttpConfig, RetryingSession

DEFAULT_BASE_URL = "https://api.windy.com/webcams/api/v3"
API_KEY_HEADER = "x-windy-api-key"

# Search scope is fixed for every request.
NEARBY_RADIUS_KM = 50
CATEGORY = "landscape"
MAX_RESULTS = 50

_log = logging.getLogger(__name__)


class WindyWebcamAdapter(WebcamCatalogPort):
    """REST adapter for the Windy webcams v3 search endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        request_timeout_s: float = 10,
    ) -> None:
        if not (api_key or "").strip():
            raise ValueError("WindyWebcamAdapter requires an API key")
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.cfg = HttpConfig(
            request_timeout_s=request_timeout_s,
            retries=0,
            api_key_header=API_KEY_HEADER,
        )
        self.session = RetryingSession(api_key.strip(), self.cfg)

    def fetch(self, latitude: float, longitude: float) -> WebcamCatalog:
        url = f"{self.base_url}/webcams"
        params = self.build_params(latitude, longitude)
        ctx = f"webcams[{latitude},{longitude}]"
        resp = self.session.get(url, params=params)
        raise_for_status(resp, ctx)
        catalog = self.parse_catalog(json_body(resp, ctx), ctx=ctx)
        _log.info("Fetched %d webcams near %s,%s", len(catalog), latitude, longitude)
        return catalog

    @staticmethod
    def build_params(latitude: float, longitude: float) -> Dict[str, Any]:
        return {
            "nearby": f"{latitude},{longitude},{NEARBY_RADIUS_KM}",
            "categories": CATEGORY,
            "include": "location,urls",
            "limit": MAX_RESULTS,
            "lang": "en",
        }

    # ------------------------------------------------------------------
    # Deserialization
    # ------------------------------------------------------------------
    @classmethod
    def parse_catalog(cls, payload: Any, *, ctx: str = "webcams") -> WebcamCatalog:
        if not isinstance(payload, Mapping):
            raise ApiResponseError(f"{ctx}: expected object response", payload=payload, context=ctx)
        entries = payload.get("webcams")
        if not isinstance(entries, list):
            raise ApiResponseError(f"{ctx}: missing 'webcams' list", payload=payload, context=ctx)
        webcams: List[WebcamSummary] = []
        for index, entry in enumerate(entries):
            webcams.append(cls._parse_webcam(entry, ctx=f"{ctx}[{index}]"))
        return tuple(webcams)

    @classmethod
    def _parse_webcam(cls, entry: Any, *, ctx: str) -> WebcamSummary:
        if not isinstance(entry, Mapping):
            raise ApiResponseError(f"{ctx}: expected object entry", payload=entry, context=ctx)
        webcam_id = cls._parse_id(entry.get("webcamId"), ctx=ctx)
        location = entry.get("location") if isinstance(entry.get("location"), Mapping) else {}
        urls = entry.get("urls") if isinstance(entry.get("urls"), Mapping) else {}
        return WebcamSummary(
            id=webcam_id,
            title=cls._text(entry.get("title")),
            location=WebcamLocation(
                city=cls._text(location.get("city")),
                country=cls._text(location.get("country")),
            ),
            links=WebcamLinks(
                viewer_url=cls._text(urls.get("detail")),
                provider_url=cls._text(urls.get("provider")),
            ),
        )

    @staticmethod
    def _parse_id(raw: Any, *, ctx: str) -> int:
        if isinstance(raw, bool):
            raise ApiResponseError(f"{ctx}: invalid webcamId", payload=raw, context=ctx)
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, str) and raw.strip().isdigit():
            value = int(raw.strip())
        else:
            raise ApiResponseError(f"{ctx}: invalid webcamId", payload=raw, context=ctx)
        if value < 0:
            raise ApiResponseError(f"{ctx}: invalid webcamId", payload=raw, context=ctx)
        return value

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


__all__ = [
    "CATEGORY",
    "DEFAULT_BASE_URL",
    "MAX_RESULTS",
    "NEARBY_RADIUS_KM",
    "WindyWebcamAdapter",
]
