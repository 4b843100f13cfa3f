from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from cellmontage.core.types import ProcessingConfig, Raster


def gray_raster(values: np.ndarray, alpha: int = 255) -> Raster:
    """RGBA raster with R = G = B = values."""
    values = np.asarray(values, dtype=np.uint8)
    arr = np.empty((*values.shape, 4), dtype=np.uint8)
    arr[..., :3] = values[..., np.newaxis]
    arr[..., 3] = alpha
    return Raster(arr)


def square_raster(width: int, height: int, x: int, y: int, size: int, value: int = 255) -> Raster:
    """Black raster with one bright square."""
    values = np.zeros((height, width), dtype=np.uint8)
    values[y:y + size, x:x + size] = value
    return gray_raster(values)


class FixedRng:
    """Stand-in random source returning a fixed position in the draw interval."""

    def __init__(self, fraction: float = 0.5) -> None:
        self.fraction = fraction
        self.calls = 0

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        return low + (high - low) * self.fraction


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def small_config() -> ProcessingConfig:
    return ProcessingConfig(
        target_width=50,
        target_height=50,
        target_intensity=200,
        randomness=0.0,
        clip_bottom=0,
        padding=10,
        column_labels=("GFP", "RFP", "Merge"),
        row_label_font_size=12,
        column_label_font_size=12,
    )


@pytest.fixture
def random_raster(rng) -> Raster:
    arr = rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
    return Raster(arr)
