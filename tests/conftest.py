"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image
from playwright.async_api import Locator, Page

from visreg.models.config import ThresholdPolicy, VisregConfig, VisualRegressionConfig


# ============================================================================
# Helper Functions
# ============================================================================


def make_image(
    width: int,
    height: int,
    color: tuple[int, int, int, int] = (255, 255, 255, 255),
    changed_pixels: int = 0,
) -> Image.Image:
    """Create a solid RGBA image with the first ``changed_pixels`` pixels differing in one channel."""
    img = Image.new("RGBA", (width, height), color)
    for i in range(changed_pixels):
        x, y = i % width, i // width
        r, g, b, a = color
        img.putpixel((x, y), ((r + 1) % 256, g, b, a))
    return img


def write_png(path: Path, image: Image.Image) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    return path


class FakeCapturer:
    """Capturer that writes a preset image and records every call."""

    def __init__(self, screenshot_root: Path, image: Optional[Image.Image] = None):
        self.screenshot_root = screenshot_root
        self.image = image if image is not None else make_image(100, 100)
        self.calls: list[tuple] = []

    def _write(self, name: str) -> None:
        write_png(self.screenshot_root / name, self.image)

    async def capture_viewport(self, name: str) -> None:
        self.calls.append(("capture_viewport", name))
        self._write(name)

    async def hover(self, locator) -> None:
        self.calls.append(("hover", locator))

    async def capture_element(self, locator, name: str) -> None:
        self.calls.append(("capture_element", locator, name))
        self._write(name)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def screenshot_dir(tmp_path: Path) -> Path:
    """Create a temporary screenshot root directory."""
    root = tmp_path / "screenshots"
    root.mkdir()
    return root


@pytest.fixture
def visreg_config(screenshot_dir: Path) -> VisregConfig:
    """Create a config rooted at the temporary screenshot directory."""
    return VisregConfig(screenshot_path=str(screenshot_dir))


@pytest.fixture
def prefixed_options() -> VisualRegressionConfig:
    return VisualRegressionConfig(screenshot_path_prefix="components")


@pytest.fixture
def default_policy() -> ThresholdPolicy:
    return ThresholdPolicy()


@pytest.fixture
def temp_config_file(visreg_config: VisregConfig, tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_file = tmp_path / "visreg-config.json"
    visreg_config.save(config_file)
    return config_file


# ============================================================================
# Capture Fixtures
# ============================================================================


@pytest.fixture
def fake_capturer(screenshot_dir: Path) -> FakeCapturer:
    return FakeCapturer(screenshot_dir)


@pytest.fixture
def mock_locator() -> AsyncMock:
    """Create a mock Playwright locator."""
    locator = AsyncMock(spec=Locator)
    locator.hover = AsyncMock()
    locator.screenshot = AsyncMock()
    return locator


@pytest.fixture
def mock_page(mock_locator: AsyncMock) -> AsyncMock:
    """Create a mock Playwright page."""
    page = AsyncMock(spec=Page)
    page.url = "https://example.com"
    page.screenshot = AsyncMock()
    page.locator = MagicMock(return_value=mock_locator)
    return page


@pytest.fixture
def image_factory():
    """Fixture that provides the make_image function."""
    return make_image


@pytest.fixture
def png_writer():
    """Fixture that provides the write_png function."""
    return write_png
