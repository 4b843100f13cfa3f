"""
TIFF Input - Decode microscopy TIFF files into RGBA8 rasters.

This module provides:
    - TiffInfo: Summary of a TIFF file for display
    - decode_tiff: Decode an in-memory TIFF buffer (first page only)
    - load_tiff: Read and decode a TIFF file from disk
    - describe_tiff: Inspect a TIFF file without converting it
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import tifffile

from cellmontage.core.exceptions import DecodeError
from cellmontage.core.types import Raster

logger = logging.getLogger(__name__)


@dataclass
class TiffInfo:
    """Summary of a TIFF file's first page."""

    path: Path
    n_pages: int
    shape: tuple[int, ...]
    dtype: str
    photometric: str

    @property
    def width(self) -> int:
        return int(self.shape[1]) if len(self.shape) >= 2 else 0

    @property
    def height(self) -> int:
        return int(self.shape[0]) if len(self.shape) >= 2 else 0


def _to_uint8(data: np.ndarray) -> np.ndarray:
    """Convert arbitrary numeric pixel data to uint8."""
    if data.dtype == np.uint8:
        return data
    if data.dtype == np.bool_:
        return data.astype(np.uint8) * 255

    values = data.astype(np.float64)
    if np.any(np.isnan(values)):
        logger.warning("Image contains NaN values, replacing with 0")
        values = np.nan_to_num(values, nan=0.0)

    vmin = float(values.min())
    vmax = float(values.max())
    if vmax - vmin < 1e-10:
        return np.zeros(values.shape, dtype=np.uint8)

    scaled = (values - vmin) / (vmax - vmin) * 255.0
    return np.clip(np.rint(scaled), 0, 255).astype(np.uint8)


def _to_rgba(data: np.ndarray) -> np.ndarray:
    """
    Convert a decoded TIFF page to an (H, W, 4) RGBA8 array.

    Accepts (H, W) grayscale, (H, W, 3|4) interleaved colour and
    (3|4, H, W) planar colour.
    """
    if data.ndim == 3 and data.shape[0] in (3, 4) and data.shape[2] not in (3, 4):
        data = np.moveaxis(data, 0, -1)

    if data.ndim == 2:
        gray = _to_uint8(data)
        rgba = np.empty((*gray.shape, 4), dtype=np.uint8)
        rgba[..., :3] = gray[..., np.newaxis]
        rgba[..., 3] = 255
        return rgba

    if data.ndim == 3 and data.shape[2] in (3, 4):
        rgb = _to_uint8(data[..., :3])
        rgba = np.empty((*rgb.shape[:2], 4), dtype=np.uint8)
        rgba[..., :3] = rgb
        rgba[..., 3] = _to_uint8(data[..., 3]) if data.shape[2] == 4 else 255
        return rgba

    raise DecodeError(f"Unsupported TIFF page shape {data.shape}")


def decode_tiff(data: bytes) -> Raster:
    """
    Decode the first page of a TIFF buffer into an RGBA8 raster.

    Args:
        data: Raw bytes of a TIFF file

    Returns:
        Raster of the first page

    Raises:
        DecodeError: If the buffer is not a valid TIFF or has no pages
    """
    if not data:
        raise DecodeError("Empty buffer")

    try:
        with tifffile.TiffFile(io.BytesIO(data)) as tif:
            if len(tif.pages) == 0:
                raise DecodeError("TIFF contains zero pages")
            if len(tif.pages) > 1:
                logger.warning("TIFF has %d pages, using the first", len(tif.pages))
            page_data = tif.pages[0].asarray()
    except DecodeError:
        raise
    except (tifffile.TiffFileError, ValueError, OSError) as e:
        raise DecodeError(f"Invalid TIFF: {e}") from e

    # Stacked samples inside one page (e.g. Z, C, Y, X): keep leading plane
    while page_data.ndim > 3 or (
        page_data.ndim == 3 and page_data.shape[0] not in (3, 4) and page_data.shape[2] not in (3, 4)
    ):
        logger.warning("TIFF page has shape %s, using the first plane", page_data.shape)
        page_data = page_data[0]

    if page_data.ndim < 2 or page_data.shape[0] == 0 or page_data.shape[1] == 0:
        raise DecodeError(f"TIFF page has no pixels (shape {page_data.shape})")

    return Raster(_to_rgba(page_data))


def load_tiff(path: str | Path) -> Raster:
    """
    Read a TIFF file and decode its first page.

    Raises:
        DecodeError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read {path}: {e}") from e

    raster = decode_tiff(data)
    logger.debug("Loaded %s as %dx%d", path.name, raster.width, raster.height)
    return raster


def describe_tiff(path: str | Path) -> TiffInfo:
    """
    Inspect a TIFF file.

    Raises:
        DecodeError: If the file cannot be opened as a TIFF or has no pages
    """
    path = Path(path)
    try:
        with tifffile.TiffFile(path) as tif:
            if len(tif.pages) == 0:
                raise DecodeError("TIFF contains zero pages")
            page = tif.pages[0]
            return TiffInfo(
                path=path,
                n_pages=len(tif.pages),
                shape=tuple(int(s) for s in page.shape),
                dtype=str(page.dtype),
                photometric=getattr(page.photometric, "name", str(page.photometric)),
            )
    except DecodeError:
        raise
    except (tifffile.TiffFileError, ValueError, OSError) as e:
        raise DecodeError(f"Invalid TIFF {path.name}: {e}") from e
