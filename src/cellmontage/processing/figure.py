"""
Figure Layout - Place channel panels side by side and draw labels.

Layout of one row (all panels at y = 0):

    [ channel 1 ] pad [ channel 2 ] pad [ merge ]

Labels are bold white text with a soft dark shadow. The row label sits at
the bottom-left of the whole row; column labels sit at the top-left of
each panel and are drawn on the first row only.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import numpy as np
from matplotlib import font_manager
from PIL import Image, ImageDraw, ImageFilter, ImageFont

from cellmontage.core.constants import (
    BACKGROUND_COLOR,
    DEFAULT_FONT_FAMILY,
    LABEL_COLOR,
    LABEL_INSET,
    SHADOW_BLUR,
    SHADOW_COLOR,
)
from cellmontage.core.exceptions import DimensionMismatchError
from cellmontage.core.types import ProcessingConfig, Raster

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def load_bold_font(family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Resolve a bold font for a CSS-style family list such as
    ``"Helvetica, Arial, sans-serif"``.

    Falls back to Pillow's built-in font if no TrueType file can be
    loaded.
    """
    families = [f.strip().strip("'\"") for f in (family or DEFAULT_FONT_FAMILY).split(",")]
    families = [f for f in families if f] or [DEFAULT_FONT_FAMILY]

    props = font_manager.FontProperties(family=families, weight="bold")
    path = font_manager.findfont(props, fallback_to_default=True)
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        logger.warning("Could not load font %s, using Pillow default", path)
        return ImageFont.load_default(size=size)


def _draw_label(
    canvas: Image.Image,
    text: str,
    xy: tuple[int, int],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    anchor: str,
) -> None:
    """Draw shadowed label text onto ``canvas`` in place."""
    shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(shadow).text(xy, text, font=font, fill=SHADOW_COLOR, anchor=anchor)
    # Gaussian sigma is half the blur length
    shadow = shadow.filter(ImageFilter.GaussianBlur(radius=SHADOW_BLUR / 2))
    canvas.alpha_composite(shadow)

    ImageDraw.Draw(canvas).text(xy, text, font=font, fill=LABEL_COLOR, anchor=anchor)


def compose_figure(
    channel1: Raster,
    channel2: Raster,
    merged: Raster,
    row_label: str,
    is_first_row: bool,
    config: ProcessingConfig,
) -> Raster:
    """
    Lay out the three panels of one montage row.

    Args:
        channel1: Normalized channel 1 panel
        channel2: Normalized channel 2 panel
        merged: Merged panel
        row_label: Condition label drawn bottom-left ("" draws nothing)
        is_first_row: Draw column labels on top of each panel
        config: Processing settings

    Returns:
        Raster of (3 * target_width + 2 * padding) x target_height

    Raises:
        DimensionMismatchError: If a panel is not target_width x target_height
    """
    tw, th = config.target_width, config.target_height
    for name, panel in (("channel1", channel1), ("channel2", channel2), ("merged", merged)):
        if panel.size != (tw, th):
            raise DimensionMismatchError(
                f"{name} panel is {panel.width}x{panel.height}, expected {tw}x{th}"
            )

    canvas = Image.new("RGBA", (config.figure_width, th), BACKGROUND_COLOR)
    for index, panel in enumerate((channel1, channel2, merged)):
        canvas.alpha_composite(Image.fromarray(panel.pixels.copy()), dest=(config.panel_x(index), 0))

    if config.show_labels:
        if row_label:
            font = load_bold_font(config.font_family, config.row_label_font_size)
            _draw_label(canvas, row_label, (LABEL_INSET, th - LABEL_INSET), font, anchor="ld")

        if is_first_row and len(config.column_labels) == 3:
            font = load_bold_font(config.font_family, config.column_label_font_size)
            for index, label in enumerate(config.column_labels):
                if label:
                    xy = (config.panel_x(index) + LABEL_INSET, LABEL_INSET)
                    _draw_label(canvas, label, xy, font, anchor="la")

    return Raster(np.asarray(canvas, dtype=np.uint8).copy())
