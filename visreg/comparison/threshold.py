"""Default area-banded thresholds."""

from __future__ import annotations

from visreg.models.config import ThresholdPolicy

DEFAULT_POLICY = ThresholdPolicy()


def threshold_for(area: int) -> float:
    """Return the allowed diff ratio for a screenshot of the given area."""
    return DEFAULT_POLICY.threshold_for(area)
