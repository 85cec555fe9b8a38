"""Pixel-buffer comparison between two screenshots."""

from __future__ import annotations

import logging

from PIL import ImageChops

from visreg.comparison.threshold import DEFAULT_POLICY
from visreg.imaging.screenshot import Screenshot
from visreg.models.config import ThresholdPolicy
from visreg.models.outcome import ComparisonResult

logger = logging.getLogger(__name__)


def is_same_size(a: Screenshot, b: Screenshot) -> bool:
    """Determine if two screenshots have the same width and height."""
    return a.width == b.width and a.height == b.height


def count_differing_bytes(a: Screenshot, b: Screenshot) -> int:
    """Count byte positions (every channel, alpha included) where the buffers differ."""
    diff = ImageChops.difference(a.image, b.image).tobytes()
    return len(diff) - diff.count(0)


def percent_diff(a: Screenshot, b: Screenshot) -> float:
    """Compute the difference between two screenshots.

    Returns 1.0 (100% different) if the screenshots are not the same size.
    Otherwise returns the number of differing bytes divided by the number
    of pixels. Each RGBA pixel contributes up to four differing bytes, so
    a heavily changed image can score above 1.0.
    """
    if not is_same_size(a, b):
        return 1.0

    if a.area == 0:
        return 0.0

    return count_differing_bytes(a, b) / a.area


def compare(base: Screenshot, test: Screenshot, policy: ThresholdPolicy | None = None) -> ComparisonResult:
    """Compare a test screenshot against a base, using the base area to pick the threshold."""
    policy = policy or DEFAULT_POLICY
    same_size = is_same_size(base, test)
    diff_ratio = percent_diff(base, test)
    threshold = policy.threshold_for(base.area)
    logger.debug(
        "Compared %dx%d base with %dx%d test: diff %.5f, threshold %.4f",
        base.width, base.height, test.width, test.height, diff_ratio, threshold,
    )
    return ComparisonResult(
        same_size=same_size,
        diff_ratio=diff_ratio,
        threshold=threshold,
        base_size=base.size,
        test_size=test.size,
    )
