"""Exception types raised by the visual regression checker."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from visreg.models.outcome import RegressionOutcome


class VisualRegressionError(Exception):
    """Base class for all visreg errors."""


class DecodeError(VisualRegressionError, ValueError):
    """Raised when image bytes cannot be decoded as a PNG."""


class CaptureError(VisualRegressionError):
    """Raised when the browser driver fails to capture a screenshot."""


class CaptureTimeoutError(CaptureError):
    """Raised when a capture does not complete before the driver's timeout."""


class RegressionFailure(VisualRegressionError, AssertionError):
    """A failed visual check. Subclasses AssertionError so test runners report it as a failure."""

    def __init__(self, outcome: RegressionOutcome):
        super().__init__(outcome.message)
        self.outcome = outcome


class NoBaselineError(RegressionFailure):
    """No base screenshot existed; one has been captured for review."""


class SizeMismatchError(RegressionFailure):
    """Base and test screenshots have different dimensions."""


class ContentMismatchError(RegressionFailure):
    """Base and test screenshots differ by more than the allowed threshold."""
