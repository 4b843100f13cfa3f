from __future__ import annotations

import numpy as np
import pytest

from cellmontage.core.exceptions import DimensionMismatchError
from cellmontage.core.types import Raster
from cellmontage.processing.figure import compose_figure, load_bold_font

BLACK = (0, 0, 0, 255)


def _panels(config, colors=((10, 0, 0, 255), (0, 20, 0, 255), (0, 0, 30, 255))):
    tw, th = config.target_width, config.target_height
    return tuple(Raster.blank(tw, th, c) for c in colors)


def test_output_size(small_config) -> None:
    figure = compose_figure(*_panels(small_config), "", False, small_config)
    assert figure.size == (3 * 50 + 2 * 10, 50)
    assert not figure.pixels.flags.writeable


def test_panels_placed_with_white_gaps(small_config) -> None:
    config = small_config.with_updates(show_labels=False)
    figure = compose_figure(*_panels(config), "Row", True, config)
    px = figure.pixels
    assert px[25, 0].tolist() == [10, 0, 0, 255]
    assert px[25, 49].tolist() == [10, 0, 0, 255]
    assert px[25, 60].tolist() == [0, 20, 0, 255]
    assert px[25, 120].tolist() == [0, 0, 30, 255]
    assert px[25, 169].tolist() == [0, 0, 30, 255]
    assert (px[:, 50:60] == 255).all()
    assert (px[:, 110:120] == 255).all()


def test_zero_padding_has_no_gap(small_config) -> None:
    config = small_config.with_updates(padding=0, show_labels=False)
    figure = compose_figure(*_panels(config), "", False, config)
    assert figure.width == 150
    assert figure.pixels[0, 50].tolist() == [0, 20, 0, 255]


def test_translucent_panels_blend_over_white(small_config) -> None:
    config = small_config.with_updates(show_labels=False)
    clear = Raster.blank(50, 50, (0, 0, 0, 0))
    figure = compose_figure(clear, clear, clear, "", False, config)
    assert (figure.pixels == 255).all()


def test_row_label_drawn_bottom_left(small_config) -> None:
    panels = _panels(small_config, (BLACK, BLACK, BLACK))
    plain = compose_figure(*panels, "", False, small_config).pixels
    labelled = compose_figure(*panels, "WT", False, small_config).pixels

    diff = np.any(plain != labelled, axis=-1)
    ys, xs = np.nonzero(diff)
    assert diff.any()
    assert ys.min() >= 15
    assert xs.min() >= 5 and xs.max() < 50
    # brightest label pixels are white text on the black panel
    assert labelled[ys, xs, :3].max() == 255


def test_column_labels_only_on_first_row(small_config) -> None:
    panels = _panels(small_config, (BLACK, BLACK, BLACK))
    other = compose_figure(*panels, "", False, small_config).pixels
    first = compose_figure(*panels, "", True, small_config).pixels

    diff = np.any(other != first, axis=-1)
    assert diff[:, :50].any()
    assert diff[:, 60:110].any()
    assert diff[:, 120:].any()
    ys, _ = np.nonzero(diff)
    assert ys.max() < 30


def test_empty_column_label_is_skipped(small_config) -> None:
    config = small_config.with_updates(column_labels=("GFP", "", "Merge"))
    panels = _panels(config, (BLACK, BLACK, BLACK))
    other = compose_figure(*panels, "", False, config).pixels
    first = compose_figure(*panels, "", True, config).pixels
    diff = np.any(other != first, axis=-1)
    assert diff[:, :50].any()
    assert not diff[:, 62:110].any()


def test_labels_disabled(small_config) -> None:
    config = small_config.with_updates(show_labels=False)
    panels = _panels(config, (BLACK, BLACK, BLACK))
    a = compose_figure(*panels, "", False, config)
    b = compose_figure(*panels, "WT", True, config)
    np.testing.assert_array_equal(a.pixels, b.pixels)


def test_panel_size_mismatch_raises(small_config) -> None:
    ch1, ch2, _ = _panels(small_config)
    with pytest.raises(DimensionMismatchError):
        compose_figure(ch1, ch2, Raster.blank(49, 50), "", False, small_config)


def test_font_lookup_accepts_family_lists() -> None:
    font = load_bold_font("'No Such Font', sans-serif", 14)
    assert font is load_bold_font("'No Such Font', sans-serif", 14)
    assert font.getbbox("Merge")[2] > 0
