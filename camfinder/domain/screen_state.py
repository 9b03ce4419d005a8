"""Screen states of the webcam browser navigation.

``ScreenState`` is a closed union of frozen dataclasses. Consumers dispatch
with ``isinstance`` and finish with :func:`unreachable_state` so an added
variant fails loudly instead of rendering nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn, Union

from .entities import WebcamCatalog, WebcamSummary


@dataclass(frozen=True)
class LocationInput:
    """Initial screen: coordinate entry and "use current location"."""


@dataclass(frozen=True)
class WebcamList:
    """Catalog returned for the last successful search."""

    catalog: WebcamCatalog

    def __post_init__(self) -> None:
        object.__setattr__(self, "catalog", tuple(self.catalog))


@dataclass(frozen=True)
class WebcamDetail:
    """One selected webcam plus the catalog it was picked from."""

    selected: WebcamSummary
    catalog: WebcamCatalog
    """Kept so going back restores the list without another request."""

    def __post_init__(self) -> None:
        catalog = tuple(self.catalog)
        if self.selected not in catalog:
            raise ValueError("WebcamDetail.selected must be an entry of its catalog.")
        object.__setattr__(self, "catalog", catalog)


ScreenState = Union[LocationInput, WebcamList, WebcamDetail]


def unreachable_state(state: object) -> NoReturn:
    raise TypeError(f"Unhandled screen state: {state!r}")


def state_name(state: ScreenState) -> str:
    """Short label used in log lines."""
    if isinstance(state, LocationInput):
        return "LocationInput"
    if isinstance(state, WebcamList):
        return f"List[{len(state.catalog)}]"
    if isinstance(state, WebcamDetail):
        return f"Detail[{state.selected.id}]"
    unreachable_state(state)


__all__ = [
    "LocationInput",
    "ScreenState",
    "WebcamDetail",
    "WebcamList",
    "state_name",
    "unreachable_state",
]
