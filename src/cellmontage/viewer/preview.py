"""
Montage Preview - Display composed rows and the chosen ROI.

Usage:
    python -m cellmontage montage a1.tif a2.tif --view

Controls:
    - Q/Escape: Quit
"""

from __future__ import annotations

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle as RectPatch

from cellmontage.core.types import Raster, Rectangle


class MontagePreview:
    """Matplotlib window showing a montage, optionally above its source channels."""

    DARK_BG = "#1e1e1e"
    ROI_COLOR = "#ffd400"

    def __init__(
        self,
        montage: Raster,
        title: str | None = None,
        sources: tuple[Raster, Raster] | None = None,
        roi: Rectangle | None = None,
    ) -> None:
        """Initialize the preview.

        Args:
            montage: Composed row or stacked montage
            title: Window title
            sources: Full-size channel 1 and channel 2 rasters to show the ROI on
            roi: Region drawn as an outline over ``sources``
        """
        self.montage = montage
        self.title = title
        self.sources = sources
        self.roi = roi
        self._setup_figure()

    def _setup_figure(self) -> None:
        """Create the figure and draw all panels."""
        if self.sources is None:
            self.fig, ax = plt.subplots(figsize=(10, 10 * self.montage.height / self.montage.width + 0.5))
            self.ax_montage = ax
            self.ax_sources: list = []
        else:
            self.fig = plt.figure(figsize=(10, 8))
            grid = self.fig.add_gridspec(2, 2, height_ratios=(2, 1))
            self.ax_sources = [self.fig.add_subplot(grid[0, 0]), self.fig.add_subplot(grid[0, 1])]
            self.ax_montage = self.fig.add_subplot(grid[1, :])

        self.fig.patch.set_facecolor(self.DARK_BG)
        if self.title:
            self.fig.suptitle(self.title, color="white", fontsize=11)

        self.ax_montage.imshow(self.montage.pixels, interpolation="nearest")
        self.ax_montage.set_axis_off()

        if self.sources is not None:
            for ax, source, name in zip(self.ax_sources, self.sources, ("Channel 1", "Channel 2")):
                ax.imshow(source.pixels, interpolation="nearest")
                ax.set_title(name, color="white", fontsize=10)
                ax.set_axis_off()
                if self.roi is not None:
                    self._draw_roi(ax, self.roi)

        self.fig.canvas.mpl_connect("key_press_event", self._on_key)

    def _draw_roi(self, ax, roi: Rectangle) -> None:
        """Outline the ROI; imshow pixel centres sit on integer coordinates."""
        ax.add_patch(
            RectPatch(
                (roi.x - 0.5, roi.y - 0.5), roi.w, roi.h,
                fill=False, edgecolor=self.ROI_COLOR, lw=1.5,
            )
        )

    def _on_key(self, event: object) -> None:
        """Handle keyboard events."""
        key = getattr(event, "key", "")
        if key in ("q", "escape"):
            plt.close(self.fig)

    def show(self) -> None:
        """Display the preview."""
        plt.show()


def show_montage(
    montage: Raster,
    title: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Display a composed row or montage.

    Returns:
        The matplotlib Figure (left open when show=False)
    """
    preview = MontagePreview(montage, title=title)
    if show:
        preview.show()
    return preview.fig
