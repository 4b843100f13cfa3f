from __future__ import annotations

import re

import numpy as np
import pytest
from PIL import Image

from conftest import square_raster

from cellmontage.core.exceptions import DimensionMismatchError, RowIncompleteError
from cellmontage.core.types import Raster
from cellmontage.processing.export import (
    default_montage_name,
    export_montage_png,
    export_row_png,
    stack_montage,
)
from cellmontage.processing.montage import MontageRow, compose_montage_row, compose_rows


@pytest.fixture
def channel() -> Raster:
    return square_raster(80, 60, 20, 20, 15)


def test_incomplete_rows_yield_none(small_config, channel, caplog) -> None:
    rows = [
        MontageRow(channel, channel, "A"),
        MontageRow(channel, None, "B"),
        MontageRow(channel, channel, "C"),
    ]
    figures = compose_rows(rows, small_config, np.random.default_rng(0))
    assert figures[1] is None
    assert figures[0].size == figures[2].size == (170, 50)
    assert "'B'" in caplog.text


def test_failing_row_does_not_abort_the_batch(small_config, channel, caplog) -> None:
    taller = square_raster(80, 61, 20, 20, 15)
    rows = [
        MontageRow(channel, channel, "A"),
        MontageRow(channel, taller, "B"),
        MontageRow(channel, channel, "C"),
    ]
    figures = compose_rows(rows, small_config, np.random.default_rng(0))
    assert figures[1] is None
    assert figures[0].size == figures[2].size == (170, 50)
    assert "80x61" in caplog.text


def test_degenerate_row_is_skipped(small_config, channel) -> None:
    tiny = square_raster(4, 1, 0, 0, 1)
    config = small_config.with_updates(target_width=20, target_height=100)
    figures = compose_rows([MontageRow(tiny, tiny, "X"), MontageRow(channel, channel, "Y")], config)
    assert figures[0] is None
    assert figures[1].size == (3 * 20 + 2 * 10, 100)


def test_swapped_row_exchanges_channels(channel) -> None:
    other = square_raster(80, 60, 0, 0, 5)
    row = MontageRow(channel, other, "WT")
    swapped = row.swapped()
    assert swapped.channel1 is other
    assert swapped.channel2 is channel
    assert swapped.label == "WT"
    assert row.channel1 is channel
    assert MontageRow(None, channel).swapped().channel2 is None


def test_column_labels_on_first_row_only(small_config, channel) -> None:
    rows = [MontageRow(channel, channel), MontageRow(channel, channel)]
    first, second = compose_rows(rows, small_config, np.random.default_rng(0))
    assert not np.array_equal(first.pixels, second.pixels)

    plain = compose_rows(rows, small_config.with_updates(show_labels=False), np.random.default_rng(0))
    np.testing.assert_array_equal(plain[0].pixels, plain[1].pixels)


def test_compose_single_incomplete_row_raises(small_config, channel) -> None:
    with pytest.raises(RowIncompleteError):
        compose_montage_row(MontageRow(None, channel, "X"), small_config)
    assert not MontageRow(channel).is_complete


def test_stack_montage_layout() -> None:
    top = Raster.blank(30, 10, (0, 0, 0, 255))
    bottom = Raster.blank(30, 5, (9, 9, 9, 255))
    stacked = stack_montage([top, None, bottom], gap=4)
    assert stacked.size == (30, 19)
    assert (stacked.pixels[:10] == [0, 0, 0, 255]).all()
    assert (stacked.pixels[10:14] == 255).all()
    assert (stacked.pixels[14:] == [9, 9, 9, 255]).all()


def test_stack_montage_errors() -> None:
    with pytest.raises(ValueError, match="No complete rows"):
        stack_montage([None, None])
    with pytest.raises(ValueError):
        stack_montage([Raster.blank(2, 2)], gap=-1)
    with pytest.raises(DimensionMismatchError):
        stack_montage([Raster.blank(2, 2), Raster.blank(3, 2)])


def test_export_row_png_fixes_suffix(tmp_path) -> None:
    figure = Raster.blank(12, 7, (1, 2, 3, 255))
    saved = export_row_png(figure, tmp_path / "nested" / "row.tif")
    assert saved == tmp_path / "nested" / "row.png"
    with Image.open(saved) as img:
        assert img.size == (12, 7)
        assert img.getpixel((0, 0)) == (1, 2, 3, 255)


def test_export_montage_png(tmp_path) -> None:
    rows = [Raster.blank(20, 5), Raster.blank(20, 5)]
    saved = export_montage_png(rows, tmp_path / "montage.png", gap=10)
    with Image.open(saved) as img:
        assert img.size == (20, 20)


def test_default_montage_name() -> None:
    assert re.fullmatch(r"montage_\d{13}\.png", default_montage_name())
