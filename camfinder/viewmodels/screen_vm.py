from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..domain.entities import WebcamSummary
from ..domain.screen_state import (
    LocationInput,
    ScreenState,
    WebcamDetail,
    WebcamList,
    unreachable_state,
)

WebcamRow = Tuple[int, str, str]

EMPTY_CATALOG_TEXT = "No webcams found for the given location."


@dataclass
class ScreenVM:
    """Turns the current screen state into view DTOs for the presenters."""

    on_render: Optional[Callable[[Dict], None]] = None

    last_dto: Optional[Dict] = None

    def apply_state(self, state: ScreenState) -> Dict:
        dto = self.build_dto(state)
        self.last_dto = dto
        if self.on_render:
            self.on_render(dto)
        return dto

    def build_dto(self, state: ScreenState) -> Dict:
        if isinstance(state, LocationInput):
            return {"screen": "input"}
        if isinstance(state, WebcamList):
            rows = self.derive_rows(state.catalog)
            return {
                "screen": "list",
                "rows": rows,
                "empty_text": EMPTY_CATALOG_TEXT if not rows else "",
            }
        if isinstance(state, WebcamDetail):
            return {"screen": "detail", **self.derive_detail(state.selected)}
        unreachable_state(state)

    @staticmethod
    def derive_rows(catalog) -> List[WebcamRow]:
        """Rows in catalog order: (id, title, id label)."""
        return [(webcam.id, webcam.title, f"ID: {webcam.id}") for webcam in catalog]

    @staticmethod
    def derive_detail(webcam: WebcamSummary) -> Dict:
        return {
            "id": webcam.id,
            "title": webcam.title,
            "location": str(webcam.location),
            "viewer_url": webcam.links.viewer_url,
            "provider_url": webcam.links.provider_url,
        }


__all__ = ["EMPTY_CATALOG_TEXT", "ScreenVM", "WebcamRow"]
