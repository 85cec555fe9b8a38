"""Visual regression workflow: capture, compare, and promote screenshots.

A check is keyed by a name (plus optional prefix) that maps to two files
under the configured screenshot root::

    <screenshot_path>/<prefix>/<name>.png       base (accepted) screenshot
    <screenshot_path>/<prefix>/<name>Test.png   transient capture, deleted after loading

The first run for a name always fails so that a human reviews the new base
image. Any later failure overwrites the base with the latest capture, so the
next run compares against the newest state; ``git checkout <path>`` undoes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

from visreg.capture.playwright_capture import Capturer, LocatorLike
from visreg.comparison.comparator import compare
from visreg.errors import ContentMismatchError, NoBaselineError, SizeMismatchError
from visreg.imaging.screenshot import Screenshot
from visreg.models.config import VisregConfig, VisualRegressionConfig
from visreg.models.outcome import ComparisonResult, RegressionOutcome

logger = logging.getLogger(__name__)

SIZE_MISMATCH_REASON = "The screenshots are different sizes"
CONTENT_MISMATCH_REASON = "The screenshots have different content"


@dataclass(frozen=True)
class ScreenshotPaths:
    base_name: str  # relative to the screenshot root, as passed to the capturer
    base_path: Path
    test_name: str
    test_path: Path


def resolve_paths(screenshot_path: str | Path, prefix: str, name: str) -> ScreenshotPaths:
    """Map a check name to its base and test screenshot locations."""
    prefix_dir = Path(prefix) if prefix else Path()
    base_name = str(prefix_dir / f"{name}.png")
    test_name = str(prefix_dir / f"{name}Test.png")
    root = Path(screenshot_path)
    return ScreenshotPaths(
        base_name=base_name,
        base_path=root / base_name,
        test_name=test_name,
        test_path=root / test_name,
    )


class VisualRegression:
    """Runs named visual checks against one capturer and configuration."""

    def __init__(
        self,
        capturer: Capturer,
        config: VisregConfig,
        options: VisualRegressionConfig | None = None,
    ):
        self.capturer = capturer
        self.config = config
        self.options = options or VisualRegressionConfig()

    async def run(self, name: str, locator: Optional[LocatorLike] = None) -> RegressionOutcome:
        """Run one check. Returns the outcome on pass, raises a RegressionFailure otherwise."""
        paths = resolve_paths(self.config.screenshot_path, self.options.screenshot_path_prefix, name)

        if not paths.base_path.exists():
            await self._bootstrap(name, paths, locator)

        await self._capture(paths.test_name, locator)
        # Load the test capture first so it is removed even if the base fails to decode
        test_shot = self._load_test_screenshot(paths.test_path)
        base_shot = Screenshot.from_path(paths.base_path)

        comparison = compare(base_shot, test_shot, self.config.thresholds)
        if not comparison.same_size:
            self._fail(SizeMismatchError, name, paths, test_shot, SIZE_MISMATCH_REASON, comparison)
        if comparison.diff_ratio > comparison.threshold:
            self._fail(ContentMismatchError, name, paths, test_shot, CONTENT_MISMATCH_REASON, comparison)

        outcome = RegressionOutcome(
            status="pass", name=name, base_path=str(paths.base_path), comparison=comparison,
        )
        logger.info(outcome.message)
        return outcome

    async def _capture(self, screenshot_name: str, locator: Optional[LocatorLike]) -> None:
        # The capturer resolves names against the screenshot root itself
        if locator is not None:
            await self.capturer.hover(locator)
            await self.capturer.capture_element(locator, screenshot_name)
        else:
            await self.capturer.capture_viewport(screenshot_name)

    async def _bootstrap(
        self, name: str, paths: ScreenshotPaths, locator: Optional[LocatorLike]
    ) -> NoReturn:
        await self._capture(paths.base_name, locator)
        outcome = RegressionOutcome(status="no_baseline", name=name, base_path=str(paths.base_path))
        logger.info("Captured new base screenshot for '%s' at %s", name, paths.base_path)
        raise NoBaselineError(outcome)

    @staticmethod
    def _load_test_screenshot(test_path: Path) -> Screenshot:
        try:
            return Screenshot.from_path(test_path)
        finally:
            # Remove the test screenshot whether or not it decoded
            test_path.unlink(missing_ok=True)

    @staticmethod
    def _fail(
        error_cls: type[SizeMismatchError] | type[ContentMismatchError],
        name: str,
        paths: ScreenshotPaths,
        test_shot: Screenshot,
        reason: str,
        comparison: ComparisonResult,
    ) -> NoReturn:
        # Overwrite the current base screenshot
        test_shot.save_to_path(paths.base_path)
        outcome = RegressionOutcome(
            status="fail", name=name, base_path=str(paths.base_path),
            reason=reason, comparison=comparison,
        )
        logger.warning(
            "Visual check '%s' failed (%s, diff %.5f > %.4f); base screenshot overwritten",
            name, reason, comparison.diff_ratio, comparison.threshold,
        )
        raise error_cls(outcome)


async def run_visual_regression(
    capturer: Capturer,
    config: VisregConfig,
    name: str,
    locator: Optional[LocatorLike] = None,
    options: VisualRegressionConfig | None = None,
) -> RegressionOutcome:
    """Run a single named visual check."""
    return await VisualRegression(capturer, config, options).run(name, locator)
