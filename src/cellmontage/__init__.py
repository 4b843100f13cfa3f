"""
Cellmontage Tools - Align and composite two-channel microscopy images.

This package crops paired channel images to their brightest shared region,
normalizes and merges them, and lays the results out as labelled montage
figures.

Modules:
    core: Types, constants, configuration, TIFF input and exceptions
    processing: ROI search, normalization, merging, layout and export
    viewer: Matplotlib previews
"""

from cellmontage.core import (
    # Types
    Raster,
    Rectangle,
    ProcessingConfig,
    # Input
    decode_tiff,
    load_tiff,
    describe_tiff,
    # Config
    load_processing_config,
    save_processing_config,
    # Exceptions
    MontageError,
    DecodeError,
    DimensionMismatchError,
    DegenerateGeometryError,
    RowIncompleteError,
)
from cellmontage.processing import (
    # Core pipeline
    IntegralImageIndex,
    find_co_brightest_roi,
    normalize_channel,
    merge_channels,
    compose_figure,
    compose_row,
    process_row,
    # Montage
    MontageRow,
    compose_rows,
    stack_montage,
    export_row_png,
    export_montage_png,
)
from cellmontage.viewer import MontagePreview, show_montage

__version__ = "0.1.0"

__all__ = [
    # Types
    "Raster",
    "Rectangle",
    "ProcessingConfig",
    # Input
    "decode_tiff",
    "load_tiff",
    "describe_tiff",
    # Config
    "load_processing_config",
    "save_processing_config",
    # Exceptions
    "MontageError",
    "DecodeError",
    "DimensionMismatchError",
    "DegenerateGeometryError",
    "RowIncompleteError",
    # Processing
    "IntegralImageIndex",
    "find_co_brightest_roi",
    "normalize_channel",
    "merge_channels",
    "compose_figure",
    "compose_row",
    "process_row",
    # Montage
    "MontageRow",
    "compose_rows",
    "stack_montage",
    "export_row_png",
    "export_montage_png",
    # Viewer
    "MontagePreview",
    "show_montage",
]
