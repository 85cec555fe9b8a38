"""Screenshot capture: the browser-driver side of a visual check."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from visreg.errors import CaptureError, CaptureTimeoutError

logger = logging.getLogger(__name__)

# A CSS/Playwright selector string or an already-built Locator
LocatorLike = Union[str, Locator]


class Capturer(Protocol):
    """Anything that can write screenshots under a screenshot root directory.

    ``name`` is always relative to that root, e.g. ``"header/logo.png"``.
    """

    async def capture_viewport(self, name: str) -> None: ...

    async def hover(self, locator: LocatorLike) -> None: ...

    async def capture_element(self, locator: LocatorLike, name: str) -> None: ...


class PlaywrightCapturer:
    """Captures screenshots from a Playwright page."""

    def __init__(self, page: Page, screenshot_path: str | Path, timeout_ms: int = 30000):
        self.page = page
        self.screenshot_root = Path(screenshot_path)
        self.timeout_ms = timeout_ms

    def _resolve_locator(self, locator: LocatorLike) -> Locator:
        if isinstance(locator, str):
            return self.page.locator(locator)
        return locator

    def _destination(self, name: str) -> Path:
        dest = self.screenshot_root / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        return dest

    async def capture_viewport(self, name: str) -> None:
        dest = self._destination(name)
        logger.debug("Capturing viewport to %s", dest)
        try:
            await self.page.screenshot(path=str(dest), full_page=False, timeout=self.timeout_ms)
        except PlaywrightTimeoutError as e:
            raise CaptureTimeoutError(f"Timed out capturing viewport to {dest}: {e}") from e
        except PlaywrightError as e:
            raise CaptureError(f"Viewport capture to {dest} failed: {e}") from e

    async def hover(self, locator: LocatorLike) -> None:
        logger.debug("Hovering %s", locator)
        try:
            await self._resolve_locator(locator).hover(timeout=self.timeout_ms)
        except PlaywrightTimeoutError as e:
            raise CaptureTimeoutError(f"Timed out hovering {locator}: {e}") from e
        except PlaywrightError as e:
            raise CaptureError(f"Hover on {locator} failed: {e}") from e

    async def capture_element(self, locator: LocatorLike, name: str) -> None:
        dest = self._destination(name)
        logger.debug("Capturing element %s to %s", locator, dest)
        try:
            await self._resolve_locator(locator).screenshot(path=str(dest), timeout=self.timeout_ms)
        except PlaywrightTimeoutError as e:
            raise CaptureTimeoutError(f"Timed out capturing {locator} to {dest}: {e}") from e
        except PlaywrightError as e:
            raise CaptureError(f"Element capture of {locator} to {dest} failed: {e}") from e
