"""
Cellmontage core module - Types, constants, configuration, and TIFF input.

This module provides the foundational pieces shared by all stages:
    - Raster / Rectangle / ProcessingConfig: Immutable pipeline values
    - decode_tiff / load_tiff: TIFF decoding into RGBA8 rasters
    - RuntimeConfig helpers and settings-file I/O
    - Custom exceptions for error handling
"""

from cellmontage.core.constants import (
    # Processing defaults
    DEFAULT_TARGET_WIDTH,
    DEFAULT_TARGET_HEIGHT,
    DEFAULT_TARGET_INTENSITY,
    DEFAULT_PADDING,
    DEFAULT_RANDOMNESS,
    DEFAULT_CLIP_BOTTOM,
    # Labels
    DEFAULT_COLUMN_LABELS,
    DEFAULT_FONT_FAMILY,
    # Layout
    ROI_SEARCH_STRIDE,
    MONTAGE_ROW_GAP,
)
from cellmontage.core.exceptions import (
    MontageError,
    DecodeError,
    DimensionMismatchError,
    DegenerateGeometryError,
    RowIncompleteError,
)
from cellmontage.core.types import (
    Raster,
    Rectangle,
    ProcessingConfig,
)
from cellmontage.core.config import (
    RuntimeConfig,
    get_config,
    set_verbose,
    is_verbose,
    vprint,
    get_output_dir,
    load_processing_config,
    save_processing_config,
)
from cellmontage.core.file import (
    TiffInfo,
    decode_tiff,
    load_tiff,
    describe_tiff,
)

__all__ = [
    # Constants
    "DEFAULT_TARGET_WIDTH",
    "DEFAULT_TARGET_HEIGHT",
    "DEFAULT_TARGET_INTENSITY",
    "DEFAULT_PADDING",
    "DEFAULT_RANDOMNESS",
    "DEFAULT_CLIP_BOTTOM",
    "DEFAULT_COLUMN_LABELS",
    "DEFAULT_FONT_FAMILY",
    "ROI_SEARCH_STRIDE",
    "MONTAGE_ROW_GAP",
    # Exceptions
    "MontageError",
    "DecodeError",
    "DimensionMismatchError",
    "DegenerateGeometryError",
    "RowIncompleteError",
    # Types
    "Raster",
    "Rectangle",
    "ProcessingConfig",
    # Config
    "RuntimeConfig",
    "get_config",
    "set_verbose",
    "is_verbose",
    "vprint",
    "get_output_dir",
    "load_processing_config",
    "save_processing_config",
    # File
    "TiffInfo",
    "decode_tiff",
    "load_tiff",
    "describe_tiff",
]
