from __future__ import annotations

import logging
import webbrowser

from camfinder.domain.ports import UrlOpenerPort

_log = logging.getLogger(__name__)


class BrowserUrlOpener(UrlOpenerPort):
    """Open webcam links in the user's default browser."""

    def open(self, url: str) -> None:
        target = (url or "").strip()
        if not target:
            raise ValueError("No link available for this webcam.")
        _log.info("Opening %s", target)
        if not webbrowser.open(target, new=2):
            raise RuntimeError(f"Could not open {target}")
