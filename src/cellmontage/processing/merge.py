"""
Channel Merge - Combine two normalized channels into a pseudo-colour image.
"""

from __future__ import annotations

import logging

import numpy as np

from cellmontage.core.exceptions import DimensionMismatchError
from cellmontage.core.types import Raster

logger = logging.getLogger(__name__)


def is_grayscale(raster: Raster) -> np.ndarray:
    """Boolean (H, W) mask of pixels whose R, G and B are all equal."""
    px = raster.pixels
    return (px[..., 0] == px[..., 1]) & (px[..., 1] == px[..., 2])


def merge_channels(channel1: Raster, channel2: Raster) -> Raster:
    """
    Merge channel 1 (green) and channel 2 (red) into one RGBA raster.

    The rule is chosen per pixel from channel 1:

    - grayscale (R == G == B): R = channel2.R, G = channel1.R, B = 0
    - anything else: additive blend, min(255, c1 + c2) for each of R, G, B

    Alpha is always 255.

    Raises:
        DimensionMismatchError: If the rasters differ in size
    """
    if not channel1.same_size(channel2):
        raise DimensionMismatchError(
            f"Cannot merge {channel1.width}x{channel1.height} "
            f"with {channel2.width}x{channel2.height}"
        )

    c1 = channel1.pixels
    c2 = channel2.pixels
    gray = is_grayscale(channel1)

    out = np.empty_like(c1)
    out[..., 0] = c2[..., 0]
    out[..., 1] = c1[..., 0]
    out[..., 2] = 0
    out[..., 3] = 255

    colored = ~gray
    n_colored = int(np.count_nonzero(colored))
    if n_colored:
        logger.warning("Channel 1 has %d non-grayscale pixels; using additive blend there", n_colored)
        blend = np.minimum(255, c1[..., :3].astype(np.uint16) + c2[..., :3]).astype(np.uint8)
        out[colored, :3] = blend[colored]

    return Raster(out)
