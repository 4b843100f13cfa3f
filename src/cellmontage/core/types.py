"""
Montage Types - Data classes shared by every pipeline stage.

This module contains the core data structures:
    - Raster: Immutable RGBA8 pixel buffer
    - Rectangle: Axis-aligned region of interest
    - ProcessingConfig: Immutable per-invocation processing settings
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from cellmontage.core.constants import (
    CONFIG_KEY_MAP,
    DEFAULT_CLIP_BOTTOM,
    DEFAULT_COLUMN_LABEL_FONT_SIZE,
    DEFAULT_COLUMN_LABELS,
    DEFAULT_FONT_FAMILY,
    DEFAULT_PADDING,
    DEFAULT_RANDOMNESS,
    DEFAULT_ROW_LABEL_FONT_SIZE,
    DEFAULT_SHOW_LABELS,
    DEFAULT_TARGET_HEIGHT,
    DEFAULT_TARGET_INTENSITY,
    DEFAULT_TARGET_WIDTH,
    ROI_SEARCH_STRIDE,
)
from cellmontage.core.exceptions import DegenerateGeometryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Raster:
    """
    Immutable RGBA8 image.

    ``pixels`` is a row-major array of shape (height, width, 4) and dtype
    uint8. The array is marked read-only on construction; a stage that
    needs to change pixels allocates a new array and wraps it in a new
    Raster.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise TypeError(f"pixels must be a numpy array, got {type(arr).__name__}")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"pixels must have shape (height, width, 4), got {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {arr.dtype}")
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {arr.shape[1]}x{arr.shape[0]}")
        arr.flags.writeable = False

    @classmethod
    def from_array(cls, data: np.ndarray) -> Raster:
        """Build a Raster from a private copy of an (H, W, 4) uint8 array."""
        return cls(np.array(data, dtype=np.uint8, copy=True))

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        color: tuple[int, int, int, int] = (0, 0, 0, 255),
    ) -> Raster:
        """Create a raster filled with a single RGBA colour."""
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[...] = color
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height), matching PIL's convention."""
        return self.width, self.height

    @property
    def rgb(self) -> np.ndarray:
        """Read-only view of the R, G, B planes, shape (H, W, 3)."""
        return self.pixels[..., :3]

    def same_size(self, other: Raster) -> bool:
        return self.pixels.shape == other.pixels.shape

    def __repr__(self) -> str:
        return f"Raster({self.width}x{self.height})"


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in pixel coordinates, top-left origin."""

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self) -> None:
        for name in ("x", "y", "w", "h"):
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ValueError(f"Rectangle.{name} must be a non-negative int, got {value!r}")
            object.__setattr__(self, name, int(value))

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def aspect_ratio(self) -> float:
        return self.w / self.h if self.h else float("inf")

    def fits_within(self, width: int, height: int) -> bool:
        """True if the rectangle lies entirely inside a width x height image."""
        return self.right <= width and self.bottom <= height

    def as_slices(self) -> tuple[slice, slice]:
        """Row and column slices for indexing an (H, W, ...) array."""
        return slice(self.y, self.bottom), slice(self.x, self.right)


@dataclass(frozen=True)
class ProcessingConfig:
    """
    Settings for one pipeline invocation.

    Instances are immutable; use ``with_updates`` to derive a modified
    copy. Settings files use the camelCase keys listed in
    ``CONFIG_KEY_MAP`` (see ``from_dict``/``to_dict``).
    """

    # Geometry (per panel)
    target_width: int = DEFAULT_TARGET_WIDTH
    target_height: int = DEFAULT_TARGET_HEIGHT
    padding: int = DEFAULT_PADDING
    clip_bottom: int = DEFAULT_CLIP_BOTTOM

    # Intensity
    target_intensity: float = DEFAULT_TARGET_INTENSITY  # 0-255
    randomness: float = DEFAULT_RANDOMNESS              # 0.0-1.0

    # Typography
    column_labels: tuple[str, str, str] = DEFAULT_COLUMN_LABELS
    row_label_font_size: int = DEFAULT_ROW_LABEL_FONT_SIZE
    column_label_font_size: int = DEFAULT_COLUMN_LABEL_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    show_labels: bool = DEFAULT_SHOW_LABELS

    # ROI search sampling step (1 = exhaustive)
    roi_stride: int = field(default=ROI_SEARCH_STRIDE)

    def __post_init__(self) -> None:
        if self.target_width <= 0 or self.target_height <= 0:
            raise DegenerateGeometryError(
                f"Target size must be positive, got {self.target_width}x{self.target_height}"
            )
        if not (0 <= self.target_intensity <= 255):
            raise ValueError(f"target_intensity must be in [0, 255], got {self.target_intensity}")
        if not (0.0 <= self.randomness <= 1.0):
            raise ValueError(f"randomness must be in [0, 1], got {self.randomness}")
        if self.clip_bottom < 0:
            raise ValueError(f"clip_bottom must be >= 0, got {self.clip_bottom}")
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")
        if self.row_label_font_size <= 0 or self.column_label_font_size <= 0:
            raise ValueError(
                f"Font sizes must be positive, got row={self.row_label_font_size}, "
                f"column={self.column_label_font_size}"
            )
        if self.roi_stride < 1:
            raise ValueError(f"roi_stride must be >= 1, got {self.roi_stride}")

        if isinstance(self.column_labels, str):
            raise ValueError(
                f"column_labels must be a sequence of 3 strings, got {self.column_labels!r}"
            )
        labels = tuple(str(label) for label in self.column_labels)
        if len(labels) != 3:
            raise ValueError(f"column_labels must have exactly 3 entries, got {len(labels)}")
        object.__setattr__(self, "column_labels", labels)

    @property
    def aspect_ratio(self) -> float:
        return self.target_width / self.target_height

    @property
    def figure_width(self) -> int:
        """Width of one composed row: three panels and two gaps."""
        return self.target_width * 3 + self.padding * 2

    def panel_x(self, index: int) -> int:
        """Left edge of panel ``index`` (0, 1 or 2) within a composed row."""
        return index * (self.target_width + self.padding)

    def with_updates(self, **changes: Any) -> ProcessingConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProcessingConfig:
        """
        Build a config from a settings dictionary.

        Accepts either camelCase settings-file keys or field names.
        Unknown keys are ignored with a warning; missing keys keep their
        defaults.
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = CONFIG_KEY_MAP.get(key, key)
            if name not in field_names:
                logger.warning("Ignoring unknown setting %r", key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary keyed by camelCase settings-file keys."""
        reverse = {name: key for key, name in CONFIG_KEY_MAP.items()}
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            out[reverse.get(f.name, f.name)] = value
        return out
