from __future__ import annotations

import numpy as np
import pytest

from conftest import gray_raster, square_raster

from cellmontage.core.exceptions import DegenerateGeometryError, DimensionMismatchError
from cellmontage.core.types import Rectangle
from cellmontage.processing.pipeline import compose_row, process_row


def test_end_to_end_square(small_config) -> None:
    ch = square_raster(100, 100, 40, 40, 20)
    result = process_row(ch, ch, small_config, "WT", True, np.random.default_rng(0))

    assert result.roi == Rectangle(0, 0, 100, 100)
    assert result.figure.size == (170, 50)
    for panel in (result.channel1, result.channel2, result.merged):
        assert panel.size == (50, 50)
    # square is downsampled into the centre of the panel
    assert result.channel1.pixels[25, 25, 0] == 200
    assert result.channel1.pixels[2, 2, 0] == 0


def test_merged_green_is_channel1_and_red_is_channel2(small_config, rng) -> None:
    ch1 = square_raster(120, 80, 10, 10, 30, value=180)
    ch2 = square_raster(120, 80, 60, 30, 30, value=90)
    result = process_row(ch1, ch2, small_config, rng=rng)
    np.testing.assert_array_equal(result.merged.pixels[..., 1], result.channel1.pixels[..., 0])
    np.testing.assert_array_equal(result.merged.pixels[..., 0], result.channel2.pixels[..., 0])
    assert (result.merged.pixels[..., 2] == 0).all()


def test_seeded_rows_are_reproducible(small_config, random_raster) -> None:
    config = small_config.with_updates(randomness=0.2)
    a = compose_row(random_raster, random_raster, config, "A", True, np.random.default_rng(42))
    b = compose_row(random_raster, random_raster, config, "A", True, np.random.default_rng(42))
    np.testing.assert_array_equal(a.pixels, b.pixels)


def test_inputs_are_not_modified(small_config, random_raster) -> None:
    before = random_raster.pixels.copy()
    compose_row(random_raster, random_raster, small_config, rng=np.random.default_rng(1))
    np.testing.assert_array_equal(random_raster.pixels, before)


def test_channel_size_mismatch_raises(small_config) -> None:
    with pytest.raises(DimensionMismatchError):
        compose_row(gray_raster(np.zeros((10, 10))), gray_raster(np.zeros((11, 10))), small_config)


def test_clip_covering_image_raises(small_config) -> None:
    config = small_config.with_updates(clip_bottom=40)
    ch = gray_raster(np.zeros((40, 40)))
    with pytest.raises(DegenerateGeometryError):
        compose_row(ch, ch, config)


def test_extreme_aspect_raises(small_config) -> None:
    config = small_config.with_updates(target_width=500, target_height=1)
    ch = gray_raster(np.zeros((10, 10)))
    with pytest.raises(DegenerateGeometryError):
        compose_row(ch, ch, config)


def test_one_pixel_input(small_config) -> None:
    ch = gray_raster(np.full((1, 1), 50))
    figure = compose_row(ch, ch, small_config, rng=np.random.default_rng(0))
    assert figure.size == (170, 50)
