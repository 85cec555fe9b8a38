"""Configuration models for the visual regression checker."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CONFIG_PATH = "visreg-config.json"


class ThresholdPolicy(BaseModel):
    """Maximum tolerated diff ratio, banded by screenshot area.

    Two captures of an unchanged window can still differ by a few pixels.
    On a small image those pixels are a large share of the total, so small
    images get a looser bound and large images a tighter one.
    """

    small_area: int = 10000
    small_threshold: float = 0.005
    large_area: int = 800000
    large_threshold: float = 0.001
    default_threshold: float = 0.003

    @model_validator(mode="after")
    def check_bands(self) -> "ThresholdPolicy":
        if self.small_area > self.large_area:
            raise ValueError(
                f"small_area ({self.small_area}) must not exceed large_area ({self.large_area})"
            )
        for value in (self.small_threshold, self.large_threshold, self.default_threshold):
            if not 0 <= value <= 1:
                raise ValueError(f"Threshold {value} is outside [0, 1]")
        return self

    def threshold_for(self, area: int) -> float:
        if area < self.small_area:
            return self.small_threshold
        if area > self.large_area:
            return self.large_threshold
        return self.default_threshold


class VisualRegressionConfig(BaseModel):
    """Per-check options supplied by the calling test."""

    screenshot_path_prefix: str = ""


class VisregConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Root directory for base and test screenshots
    screenshot_path: str = Field(alias="screenshotPath")

    thresholds: ThresholdPolicy = Field(default_factory=ThresholdPolicy)

    @field_validator("screenshot_path")
    @classmethod
    def require_screenshot_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("screenshot_path must not be empty")
        return v

    @property
    def screenshot_root(self) -> Path:
        return Path(self.screenshot_path)

    @classmethod
    def load(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> "VisregConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
