"""
ROI Search - Locate the brightest region shared by two channels.

The search evaluates every candidate window of a fixed aspect ratio on a
regular grid of top-left corners and keeps the one with the largest
combined luminance of both channels. Window sums come from one
IntegralImageIndex per channel, so each candidate costs O(1).
"""

from __future__ import annotations

import logging
import math

import numpy as np

from cellmontage.core.config import vprint
from cellmontage.core.constants import ROI_SEARCH_STRIDE
from cellmontage.core.exceptions import DegenerateGeometryError, DimensionMismatchError
from cellmontage.core.types import Raster, Rectangle
from cellmontage.processing.integral import IntegralImageIndex

logger = logging.getLogger(__name__)


def compute_crop_size(
    width: int,
    height: int,
    aspect_ratio: float,
    clip_bottom: int = 0,
) -> tuple[int, int, int]:
    """
    Largest window of the requested aspect ratio that fits the search area.

    The window is width-constrained first; if that makes it taller than
    the searchable height it is height-constrained instead.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        aspect_ratio: Required window width / height
        clip_bottom: Rows excluded from the bottom of the search area

    Returns:
        (crop_w, crop_h, effective_height)

    Raises:
        DegenerateGeometryError: If clip_bottom removes the whole image or
            the window would be zero pixels in either direction
    """
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        raise DegenerateGeometryError(f"Aspect ratio must be positive, got {aspect_ratio}")
    if clip_bottom >= height:
        raise DegenerateGeometryError(
            f"clip_bottom ({clip_bottom}) must be smaller than the image height ({height})"
        )

    effective_h = max(1, height - clip_bottom)

    crop_w = width
    crop_h = math.floor(width / aspect_ratio)
    if crop_h > effective_h:
        crop_h = effective_h
        crop_w = math.floor(effective_h * aspect_ratio)

    if crop_w <= 0 or crop_h <= 0:
        raise DegenerateGeometryError(
            f"Crop of aspect {aspect_ratio:.4f} in {width}x{effective_h} "
            f"collapses to {crop_w}x{crop_h}"
        )
    return crop_w, crop_h, effective_h


def find_co_brightest_roi(
    channel1: Raster,
    channel2: Raster,
    aspect_ratio: float,
    clip_bottom: int = 0,
    stride: int = ROI_SEARCH_STRIDE,
) -> Rectangle:
    """
    Find the window maximizing the summed luminance of both channels.

    Corners are sampled every ``stride`` pixels in row-major order (y
    outer, x inner). Only a strictly greater total replaces the current
    best, so ties resolve to the first corner visited. With stride > 1 the
    true optimum may lie between sampled corners; pass ``stride=1`` for an
    exhaustive search.

    Args:
        channel1: First channel raster
        channel2: Second channel raster, same size as channel1
        aspect_ratio: Required window width / height
        clip_bottom: Rows at the bottom the window may not cover
        stride: Sampling step for candidate corners

    Returns:
        Rectangle fully inside the image, bottom edge at most
        ``height - clip_bottom``

    Raises:
        DimensionMismatchError: If the channels differ in size
        DegenerateGeometryError: If no window of the ratio fits
        ValueError: If stride < 1
    """
    if not channel1.same_size(channel2):
        raise DimensionMismatchError(
            f"Channel sizes differ: {channel1.width}x{channel1.height} "
            f"vs {channel2.width}x{channel2.height}"
        )
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")

    width = channel1.width
    crop_w, crop_h, effective_h = compute_crop_size(
        width, channel1.height, aspect_ratio, clip_bottom
    )

    # Tables cover the full image; clipping only limits window placement
    index1 = IntegralImageIndex(channel1)
    index2 = IntegralImageIndex(channel2)

    xs = np.arange(0, width - crop_w + 1, stride)
    ys = np.arange(0, effective_h - crop_h + 1, stride)
    if xs.size == 0 or ys.size == 0:
        logger.debug("No candidate corners for %dx%d crop", crop_w, crop_h)
        return Rectangle(0, 0, crop_w, crop_h)

    totals = index1.rect_sums(xs, ys, crop_w, crop_h) + index2.rect_sums(xs, ys, crop_w, crop_h)

    # argmax returns the first occurrence in row-major order
    best = int(np.argmax(totals))
    best_y, best_x = np.unravel_index(best, totals.shape)
    roi = Rectangle(int(xs[best_x]), int(ys[best_y]), crop_w, crop_h)

    logger.debug(
        "ROI search: %d candidates, crop %dx%d, best at (%d, %d)",
        totals.size, crop_w, crop_h, roi.x, roi.y,
    )
    vprint(
        f"[roi] {totals.size} windows of {crop_w}x{crop_h} "
        f"(stride {stride}) -> ({roi.x}, {roi.y}) total={float(totals.flat[best]):.1f}"
    )
    return roi
