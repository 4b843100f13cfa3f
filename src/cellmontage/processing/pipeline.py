"""
Row Pipeline - Compose one montage row from two channel rasters.

    channel1, channel2
        -> find_co_brightest_roi   (one shared ROI)
        -> normalize_channel       (each channel, one random draw each)
        -> merge_channels
        -> compose_figure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from cellmontage.core.exceptions import DimensionMismatchError
from cellmontage.core.types import ProcessingConfig, Raster, Rectangle
from cellmontage.processing.figure import compose_figure
from cellmontage.processing.merge import merge_channels
from cellmontage.processing.normalize import normalize_channel
from cellmontage.processing.roi import compute_crop_size, find_co_brightest_roi

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RowResult:
    """Intermediate and final products of one row."""

    roi: Rectangle
    channel1: Raster
    channel2: Raster
    merged: Raster
    figure: Raster


def process_row(
    channel1: Raster,
    channel2: Raster,
    config: ProcessingConfig,
    row_label: str = "",
    is_first_row: bool = False,
    rng: np.random.Generator | None = None,
) -> RowResult:
    """
    Run the full pipeline for one row and keep every intermediate.

    Args:
        channel1: Channel 1 (green) source raster
        channel2: Channel 2 (red) source raster, same size as channel1
        config: Processing settings
        row_label: Condition label for the row
        is_first_row: Draw column labels
        rng: Random source for the brightness jitter; channel 1 draws
            first, then channel 2

    Raises:
        DimensionMismatchError: If the channels differ in size
        DegenerateGeometryError: If no crop of the configured aspect fits
    """
    if not channel1.same_size(channel2):
        raise DimensionMismatchError(
            f"Channel sizes differ: {channel1.width}x{channel1.height} "
            f"vs {channel2.width}x{channel2.height}"
        )
    # Validate geometry before any table or buffer is allocated
    compute_crop_size(channel1.width, channel1.height, config.aspect_ratio, config.clip_bottom)

    if rng is None:
        rng = np.random.default_rng()

    roi = find_co_brightest_roi(
        channel1, channel2, config.aspect_ratio, config.clip_bottom, stride=config.roi_stride
    )
    norm1 = normalize_channel(channel1, roi, config, rng)
    norm2 = normalize_channel(channel2, roi, config, rng)
    merged = merge_channels(norm1, norm2)
    figure = compose_figure(norm1, norm2, merged, row_label, is_first_row, config)

    logger.info("Composed row %r: ROI %s -> %dx%d", row_label, roi, figure.width, figure.height)
    return RowResult(roi=roi, channel1=norm1, channel2=norm2, merged=merged, figure=figure)


def compose_row(
    channel1: Raster,
    channel2: Raster,
    config: ProcessingConfig,
    row_label: str = "",
    is_first_row: bool = False,
    rng: np.random.Generator | None = None,
) -> Raster:
    """
    Compose one labelled montage row from two same-size channel rasters.

    Returns:
        Raster of (3 * target_width + 2 * padding) x target_height

    Raises:
        DimensionMismatchError: If the channels differ in size
        DegenerateGeometryError: If no crop of the configured aspect fits
    """
    return process_row(channel1, channel2, config, row_label, is_first_row, rng).figure
