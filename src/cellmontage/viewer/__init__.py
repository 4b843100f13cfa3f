"""
Cellmontage Viewer - Matplotlib previews of composed figures.

This module provides:
    - MontagePreview: Montage window with optional ROI overlay on sources
    - show_montage: One-call preview of a row or montage
"""

from cellmontage.viewer.preview import MontagePreview, show_montage

__all__ = [
    "MontagePreview",
    "show_montage",
]
