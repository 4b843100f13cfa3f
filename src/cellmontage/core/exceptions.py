"""
Montage Exceptions - Custom exception classes for the montage pipeline.

Exception Hierarchy:
    MontageError (base)
    ├── DecodeError - Input image could not be decoded
    ├── DimensionMismatchError - Channel rasters differ in size
    ├── DegenerateGeometryError - Crop or output geometry collapses to zero
    └── RowIncompleteError - A montage row is missing a channel
"""

from __future__ import annotations


class MontageError(Exception):
    """Base exception for all montage-related errors."""


class DecodeError(MontageError):
    """Exception raised when an input image cannot be decoded.

    Examples:
        - Buffer is not a TIFF
        - TIFF contains zero pages
        - File not found or unreadable
    """


class DimensionMismatchError(MontageError):
    """Exception raised when two rasters that must match in size do not.

    Examples:
        - Channel 1 is 512x512, channel 2 is 512x480
        - Montage rows composed with different widths
    """


class DegenerateGeometryError(MontageError):
    """Exception raised when a crop or output size would be zero or negative.

    Examples:
        - clip_bottom >= image height
        - target_width or target_height <= 0
        - Aspect ratio so extreme the crop floors to 0 pixels
    """


class RowIncompleteError(MontageError):
    """Exception raised when a row is composed without both channels."""
