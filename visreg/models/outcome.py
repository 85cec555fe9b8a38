"""Result data structures produced by a visual regression run."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class ComparisonResult(BaseModel):
    """Result of comparing a base screenshot against a test screenshot."""
    same_size: bool
    diff_ratio: float  # 1.0 when sizes differ
    threshold: float
    base_size: tuple[int, int]
    test_size: tuple[int, int]

    @property
    def passed(self) -> bool:
        return self.same_size and self.diff_ratio <= self.threshold


class RegressionOutcome(BaseModel):
    status: Literal["no_baseline", "pass", "fail"]
    name: str
    base_path: str
    reason: str = ""  # empty on pass
    comparison: Optional[ComparisonResult] = None

    @property
    def passed(self) -> bool:
        return self.status == "pass"

    @property
    def message(self) -> str:
        match self.status:
            case "no_baseline":
                return (
                    f"No base screenshot! Please confirm that the image at {self.base_path} is as expected.\n"
                    "Unless it is deleted, it will be used as the base acceptance image for this test."
                )
            case "fail":
                return (
                    f"Screenshot for {self.base_path} was changed: {self.reason}!\n"
                    "This file has been overwritten with the initial assumption that this change is correct "
                    "and expected.\n"
                    f"If this change is incorrect or unexpected, run 'git checkout {self.base_path}' "
                    "to remove the changes, fix the issue, then run these tests again."
                )
            case _:
                if self.comparison:
                    return (
                        f"Screenshot for {self.base_path} matches "
                        f"(diff: {self.comparison.diff_ratio:.4%}, threshold: {self.comparison.threshold:.4%})"
                    )
                return f"Screenshot for {self.base_path} matches"
