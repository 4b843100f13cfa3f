"""
Montage Export - Stack composed rows and write them to disk.

Supported formats:
    - PNG (single row or stacked montage)
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Sequence

import numpy as np
from PIL import Image

from cellmontage.core.constants import BACKGROUND_COLOR, MONTAGE_ROW_GAP
from cellmontage.core.exceptions import DimensionMismatchError
from cellmontage.core.types import Raster


def default_montage_name() -> str:
    """File name of the form montage_<unix-ms>.png."""
    return f"montage_{int(time.time() * 1000)}.png"


def stack_montage(
    figures: Sequence[Raster | None],
    gap: int = MONTAGE_ROW_GAP,
) -> Raster:
    """
    Stack composed rows vertically on a white background.

    Args:
        figures: Composed rows; None entries (incomplete rows) are skipped
        gap: Vertical gap between rows in pixels

    Returns:
        Raster of row_width x (sum of row heights + gap * (n - 1))

    Raises:
        ValueError: If there is no complete row or gap is negative
        DimensionMismatchError: If the rows differ in width
    """
    if gap < 0:
        raise ValueError(f"gap must be >= 0, got {gap}")

    rows = [f for f in figures if f is not None]
    if not rows:
        raise ValueError("No complete rows to save")

    width = rows[0].width
    for row in rows[1:]:
        if row.width != width:
            raise DimensionMismatchError(f"Row widths differ: {width} vs {row.width}")

    height = sum(r.height for r in rows) + gap * (len(rows) - 1)
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[...] = BACKGROUND_COLOR

    y = 0
    for row in rows:
        out[y:y + row.height] = row.pixels
        y += row.height + gap

    return Raster(out)


def _save_png(raster: Raster, output_path: str | Path) -> Path:
    output_path = Path(output_path)
    if output_path.suffix.lower() != ".png":
        output_path = output_path.with_suffix(".png")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    Image.fromarray(raster.pixels.copy()).save(output_path, format="PNG", optimize=True)
    return output_path


def export_row_png(figure: Raster, output_path: str | Path) -> Path:
    """
    Save one composed row as PNG.

    Args:
        figure: Composed row
        output_path: Output file path (will add .png if needed)

    Returns:
        Path to the saved PNG file
    """
    return _save_png(figure, output_path)


def export_montage_png(
    figures: Sequence[Raster | None],
    output_path: str | Path,
    gap: int = MONTAGE_ROW_GAP,
) -> Path:
    """
    Stack composed rows and save the montage as PNG.

    Args:
        figures: Composed rows; None entries are skipped
        output_path: Output file path (will add .png if needed)
        gap: Vertical gap between rows in pixels

    Returns:
        Path to the saved PNG file
    """
    return _save_png(stack_montage(figures, gap=gap), output_path)
