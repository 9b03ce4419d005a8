from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import Optional

from camfinder.domain.entities import Coordinate, WebcamCatalog
from camfinder.domain.ports import UseCaseError, WebcamCatalogPort
from camfinder.domain.validation import is_valid_coordinate
from camfinder.usecases.error_mapping import map_api_error

_log = logging.getLogger(__name__)


class LoadWebcamCatalog:
    """Fetch the webcams around a coordinate without blocking the event loop.

    The blocking port call runs in ``executor`` (the loop's default pool when
    ``None``). Failures surface as :class:`UseCaseError`; an empty catalog is
    a normal result.
    """

    def __init__(self, catalog_port: WebcamCatalogPort, *, executor: Optional[Executor] = None) -> None:
        self.catalog_port = catalog_port
        self._executor = executor

    async def __call__(self, coordinate: Coordinate) -> WebcamCatalog:
        return await self.load(coordinate)

    async def load(self, coordinate: Coordinate) -> WebcamCatalog:
        if not is_valid_coordinate(coordinate.latitude, coordinate.longitude):
            raise UseCaseError("INVALID_COORDINATE", f"Coordinate out of range: {coordinate}")

        loop = asyncio.get_running_loop()
        try:
            catalog = await loop.run_in_executor(
                self._executor,
                self.catalog_port.fetch,
                coordinate.latitude,
                coordinate.longitude,
            )
        except Exception as exc:
            err = map_api_error(
                exc,
                default_code="CATALOG_LOAD_FAILED",
                default_message="Could not load webcams.",
            )
            _log.warning("Catalog load near %s failed: %s (%s)", coordinate, exc, err.code)
            raise err from exc

        result = tuple(catalog)
        _log.debug("Loaded %d webcams near %s", len(result), coordinate)
        return result


__all__ = ["LoadWebcamCatalog"]
