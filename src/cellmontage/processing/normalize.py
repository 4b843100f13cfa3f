"""
Channel Normalization - Crop, resample and rescale one channel.

This module provides functions for turning a full-size channel raster
into a panel of the configured size whose brightest component sits near
the target intensity.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy import ndimage

from cellmontage.core.config import vprint
from cellmontage.core.exceptions import DegenerateGeometryError
from cellmontage.core.types import ProcessingConfig, Raster, Rectangle

logger = logging.getLogger(__name__)


def crop_and_resize(
    source: Raster,
    roi: Rectangle,
    width: int,
    height: int,
) -> Raster:
    """
    Extract ``roi`` from ``source`` and resample it to width x height.

    Resampling is bilinear with pixel-centre alignment and edge clamping,
    so identical inputs always give identical outputs.

    Args:
        source: Full-size raster
        roi: Region to extract, must lie inside source
        width, height: Output size in pixels

    Returns:
        New raster of exactly width x height

    Raises:
        DegenerateGeometryError: If the ROI or output size is empty
        ValueError: If the ROI extends past the source bounds
    """
    if width <= 0 or height <= 0:
        raise DegenerateGeometryError(f"Output size must be positive, got {width}x{height}")
    if roi.w == 0 or roi.h == 0:
        raise DegenerateGeometryError(f"ROI is empty: {roi}")
    if not roi.fits_within(source.width, source.height):
        raise ValueError(f"ROI {roi} extends past {source.width}x{source.height} source")

    rows, cols = roi.as_slices()
    crop = source.pixels[rows, cols]

    if crop.shape[:2] == (height, width):
        return Raster.from_array(crop)

    scale_y = roi.h / height
    scale_x = roi.w / width

    # output[o] = input[matrix * o + offset], sampling at pixel centres
    resampled = ndimage.affine_transform(
        crop.astype(np.float32),
        np.array([scale_y, scale_x, 1.0]),
        offset=np.array([0.5 * scale_y - 0.5, 0.5 * scale_x - 0.5, 0.0]),
        output_shape=(height, width, 4),
        order=1,  # bilinear interpolation
        mode="nearest",
    )
    return Raster(np.clip(np.rint(resampled), 0, 255).astype(np.uint8))


def intensity_scale(
    peak: int,
    target_intensity: float,
    randomness: float,
    rng: np.random.Generator,
) -> float:
    """
    Scale factor that maps ``peak`` to a jittered target intensity.

    One value ``shift`` is drawn uniformly from
    [-randomness/2, +randomness/2]; the target becomes
    ``target_intensity * (1 + shift)``.
    """
    half = randomness / 2
    shift = float(rng.uniform(-half, half))
    target = target_intensity * (1.0 + shift)
    return target / max(1, peak)


def normalize_channel(
    source: Raster,
    roi: Rectangle,
    config: ProcessingConfig,
    rng: np.random.Generator | None = None,
) -> Raster:
    """
    Crop a channel to the ROI, resample it and rescale its intensity.

    All pixels share a single scale factor, so relative intensities within
    the crop are preserved while the absolute brightness varies slightly
    from run to run. R, G and B are clamped to [0, 255]; alpha is copied
    unchanged.

    Args:
        source: Full-size channel raster
        roi: Region of interest inside source
        config: Processing settings (target size, intensity, randomness)
        rng: Random source for the brightness jitter. A fresh generator is
            created when omitted; pass a seeded one for reproducible output.

    Returns:
        New raster of config.target_width x config.target_height
    """
    if rng is None:
        rng = np.random.default_rng()

    resized = crop_and_resize(source, roi, config.target_width, config.target_height)

    rgb = resized.pixels[..., :3]
    peak = max(1, int(rgb.max()))
    scale = intensity_scale(peak, config.target_intensity, config.randomness, rng)

    out = resized.pixels.copy()
    out[..., :3] = np.clip(np.rint(rgb.astype(np.float64) * scale), 0, 255).astype(np.uint8)

    logger.debug("Normalized channel: peak=%d scale=%.4f", peak, scale)
    vprint(f"[normalize] peak={peak} scale={scale:.4f}")
    return Raster(out)
