"""Tests for the Playwright capture adapter."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from visreg.capture.playwright_capture import PlaywrightCapturer
from visreg.errors import CaptureError, CaptureTimeoutError


@pytest.mark.asyncio
class TestPlaywrightCapturer:

    async def test_viewport_capture_path(self, mock_page, screenshot_dir):
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)

        await capturer.capture_viewport("home.png")

        mock_page.screenshot.assert_awaited_once()
        kwargs = mock_page.screenshot.call_args.kwargs
        assert kwargs["path"] == str(screenshot_dir / "home.png")
        assert kwargs["full_page"] is False

    async def test_creates_prefix_directories(self, mock_page, screenshot_dir):
        capturer = PlaywrightCapturer(mock_page, str(screenshot_dir))

        await capturer.capture_viewport(str(Path("components") / "nav" / "menu.png"))

        assert (screenshot_dir / "components" / "nav").is_dir()

    async def test_selector_string_resolved_to_locator(self, mock_page, mock_locator, screenshot_dir):
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)

        await capturer.hover("#submit")
        await capturer.capture_element("#submit", "button.png")

        mock_page.locator.assert_called_with("#submit")
        mock_locator.hover.assert_awaited_once()
        assert mock_locator.screenshot.call_args.kwargs["path"] == str(screenshot_dir / "button.png")

    async def test_locator_object_used_directly(self, mock_page, screenshot_dir):
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)
        locator = AsyncMock()

        await capturer.capture_element(locator, "card.png")

        mock_page.locator.assert_not_called()
        locator.screenshot.assert_awaited_once()

    async def test_timeout_mapped(self, mock_page, screenshot_dir):
        mock_page.screenshot.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)

        with pytest.raises(CaptureTimeoutError) as exc_info:
            await capturer.capture_viewport("home.png")

        assert isinstance(exc_info.value.__cause__, PlaywrightTimeoutError)

    async def test_driver_error_mapped(self, mock_page, mock_locator, screenshot_dir):
        mock_locator.hover.side_effect = PlaywrightError("Target closed")
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)

        with pytest.raises(CaptureError, match="Target closed"):
            await capturer.hover(".menu")

    async def test_element_timeout_is_capture_error(self, mock_page, mock_locator, screenshot_dir):
        mock_locator.screenshot.side_effect = PlaywrightTimeoutError("Timeout")
        capturer = PlaywrightCapturer(mock_page, screenshot_dir)

        with pytest.raises(CaptureError):
            await capturer.capture_element(".menu", "menu.png")

    async def test_custom_timeout_passed_through(self, mock_page, screenshot_dir):
        capturer = PlaywrightCapturer(mock_page, screenshot_dir, timeout_ms=5000)

        await capturer.capture_viewport("home.png")

        assert mock_page.screenshot.call_args.kwargs["timeout"] == 5000
