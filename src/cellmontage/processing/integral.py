"""
Integral Image - Summed-area table of pixel luminance.

Building the table costs O(width * height); afterwards the luminance sum
of any axis-aligned rectangle is an O(1) lookup of four corner values.
"""

from __future__ import annotations

import numpy as np

from cellmontage.core.constants import LUMA_B, LUMA_G, LUMA_R
from cellmontage.core.types import Raster


def luminance(raster: Raster) -> np.ndarray:
    """
    Per-pixel luminance ``0.299 R + 0.587 G + 0.114 B`` (alpha ignored).

    Returns:
        float64 array of shape (height, width)
    """
    rgb = raster.pixels[..., :3].astype(np.float64)
    return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]


class IntegralImageIndex:
    """
    Read-only summed-area table over one raster.

    ``table[y, x]`` holds the luminance sum over every pixel (x', y') with
    x' <= x and y' <= y. Internally the table carries an extra zero row and
    column on the top-left so that corner lookups never need a bounds
    branch.
    """

    def __init__(self, raster: Raster) -> None:
        self.width = raster.width
        self.height = raster.height

        # Running row sums, then accumulate each row onto the one above
        table = luminance(raster).cumsum(axis=1).cumsum(axis=0)

        padded = np.zeros((self.height + 1, self.width + 1), dtype=np.float64)
        padded[1:, 1:] = table
        padded.flags.writeable = False
        self._padded = padded

    @property
    def table(self) -> np.ndarray:
        """The (height, width) cumulative table, read-only."""
        return self._padded[1:, 1:]

    def _check_bounds(self, x: int, y: int, w: int, h: int) -> None:
        if x < 0 or y < 0 or w < 0 or h < 0 or x + w > self.width or y + h > self.height:
            raise ValueError(
                f"Rectangle ({x}, {y}, {w}, {h}) outside {self.width}x{self.height} image"
            )

    def rect_sum(self, x: int, y: int, w: int, h: int) -> float:
        """
        Luminance sum over the rectangle [x, x+w) x [y, y+h).

        Uses ``D - B - C + A`` where D is the bottom-right cell, B the cell
        above the top-right, C the cell left of the bottom-left and A the
        cell diagonally above-left; corners outside the image count as 0.

        Raises:
            ValueError: If the rectangle does not lie inside the image
        """
        self._check_bounds(x, y, w, h)
        if w == 0 or h == 0:
            return 0.0
        p = self._padded
        d = p[y + h, x + w]
        b = p[y, x + w]
        c = p[y + h, x]
        a = p[y, x]
        return float(d - b - c + a)

    def rect_sums(self, xs: np.ndarray, ys: np.ndarray, w: int, h: int) -> np.ndarray:
        """
        Vectorized ``rect_sum`` for every combination of corners.

        Args:
            xs: Left edges, shape (nx,)
            ys: Top edges, shape (ny,)
            w, h: Rectangle size shared by all candidates

        Returns:
            Array of shape (ny, nx); element [j, i] is the sum of the
            rectangle with top-left corner (xs[i], ys[j]).
        """
        xs = np.asarray(xs, dtype=np.intp)
        ys = np.asarray(ys, dtype=np.intp)
        if xs.size == 0 or ys.size == 0:
            return np.zeros((ys.size, xs.size), dtype=np.float64)
        self._check_bounds(int(xs.min()), int(ys.min()), w, h)
        self._check_bounds(int(xs.max()), int(ys.max()), w, h)

        p = self._padded
        top = ys[:, np.newaxis]
        left = xs[np.newaxis, :]
        return p[top + h, left + w] - p[top, left + w] - p[top + h, left] + p[top, left]
