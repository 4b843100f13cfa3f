"""
Cellmontage Processing - Alignment, normalization and layout.

This module provides functions for:
    - ROI search over summed-area tables
    - Channel crop, resampling and intensity normalization
    - Pseudo-colour channel merging
    - Row layout with labels, montage stacking and PNG export
"""

from cellmontage.processing.export import (
    default_montage_name,
    export_montage_png,
    export_row_png,
    stack_montage,
)
from cellmontage.processing.figure import compose_figure, load_bold_font
from cellmontage.processing.integral import IntegralImageIndex, luminance
from cellmontage.processing.merge import is_grayscale, merge_channels
from cellmontage.processing.montage import MontageRow, compose_montage_row, compose_rows
from cellmontage.processing.normalize import (
    crop_and_resize,
    intensity_scale,
    normalize_channel,
)
from cellmontage.processing.pipeline import RowResult, compose_row, process_row
from cellmontage.processing.roi import compute_crop_size, find_co_brightest_roi

__all__ = [
    # Integral image
    "IntegralImageIndex",
    "luminance",
    # ROI
    "compute_crop_size",
    "find_co_brightest_roi",
    # Normalization
    "crop_and_resize",
    "intensity_scale",
    "normalize_channel",
    # Merge
    "is_grayscale",
    "merge_channels",
    # Layout
    "compose_figure",
    "load_bold_font",
    # Pipeline
    "RowResult",
    "compose_row",
    "process_row",
    # Montage
    "MontageRow",
    "compose_montage_row",
    "compose_rows",
    # Export
    "default_montage_name",
    "stack_montage",
    "export_row_png",
    "export_montage_png",
]
