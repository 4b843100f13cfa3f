"""
Montage Constants - Shared constants for the alignment and montage pipeline.

This module centralizes all magic numbers used throughout the codebase
for easier maintenance and consistency.
"""

from __future__ import annotations

# =============================================================================
# Processing Defaults
# =============================================================================
# Values used when a setting is not supplied. They produce a roughly 2:1
# panel from a 512x512 confocal frame with the scale bar clipped off.

DEFAULT_TARGET_WIDTH: int = 494   # px per panel
DEFAULT_TARGET_HEIGHT: int = 246  # px per panel
DEFAULT_TARGET_INTENSITY: int = 200  # peak channel value after scaling
DEFAULT_PADDING: int = 10         # px between panels
DEFAULT_RANDOMNESS: float = 0.05  # +/- 2.5% brightness jitter
DEFAULT_CLIP_BOTTOM: int = 25     # px excluded from ROI search (scale bar)


# =============================================================================
# Label Defaults
# =============================================================================
DEFAULT_COLUMN_LABELS: tuple[str, str, str] = ("Channel 1", "Channel 2", "Merge")
DEFAULT_ROW_LABEL_FONT_SIZE: int = 24
DEFAULT_COLUMN_LABEL_FONT_SIZE: int = 24
DEFAULT_FONT_FAMILY: str = "sans-serif"
DEFAULT_SHOW_LABELS: bool = True

LABEL_INSET: int = 10  # px from the panel/figure edge
LABEL_COLOR: tuple[int, int, int, int] = (255, 255, 255, 255)
SHADOW_COLOR: tuple[int, int, int, int] = (0, 0, 0, 204)  # rgba(0,0,0,0.8)
SHADOW_BLUR: float = 4.0


# =============================================================================
# ROI Search
# =============================================================================
# Rec.601 luma weights
LUMA_R: float = 0.299
LUMA_G: float = 0.587
LUMA_B: float = 0.114

# Candidate corners are sampled every ROI_SEARCH_STRIDE pixels in x and y.
# A stride of 1 gives an exhaustive search.
ROI_SEARCH_STRIDE: int = 4


# =============================================================================
# Figure / Montage Layout
# =============================================================================
BACKGROUND_COLOR: tuple[int, int, int, int] = (255, 255, 255, 255)
MONTAGE_ROW_GAP: int = 10  # px between stacked rows

# Environment variable for the default export directory
ENV_OUTPUT_DIR: str = "CELLMONTAGE_OUTPUT_DIR"
DEFAULT_OUTPUT_DIR: str = "output"


# =============================================================================
# Settings File Keys
# =============================================================================
# Settings files use the camelCase keys of the interactive tool so that
# exported settings can be shared between the two.

CONFIG_KEY_MAP: dict[str, str] = {
    "targetWidth": "target_width",
    "targetHeight": "target_height",
    "targetIntensity": "target_intensity",
    "randomness": "randomness",
    "clipBottom": "clip_bottom",
    "padding": "padding",
    "columnLabels": "column_labels",
    "rowLabelFontSize": "row_label_font_size",
    "columnLabelFontSize": "column_label_font_size",
    "fontFamily": "font_family",
    "showLabels": "show_labels",
    "roiStride": "roi_stride",
}
