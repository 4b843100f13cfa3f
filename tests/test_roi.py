from __future__ import annotations

import numpy as np
import pytest

from conftest import gray_raster, square_raster

from cellmontage.core.exceptions import DegenerateGeometryError, DimensionMismatchError
from cellmontage.core.types import Rectangle
from cellmontage.processing.roi import compute_crop_size, find_co_brightest_roi


class TestCropSize:
    def test_width_constrained(self) -> None:
        assert compute_crop_size(100, 100, 2.0) == (100, 50, 100)

    def test_height_constrained_fallback(self) -> None:
        assert compute_crop_size(200, 100, 1.0) == (100, 100, 100)

    def test_clip_reduces_effective_height(self) -> None:
        assert compute_crop_size(40, 40, 2.0, clip_bottom=10) == (40, 20, 30)
        assert compute_crop_size(40, 40, 1.0, clip_bottom=10) == (30, 30, 30)

    def test_floors_fractional_sizes(self) -> None:
        crop_w, crop_h, _ = compute_crop_size(100, 100, 494 / 246)
        assert crop_w == 100
        assert crop_h == 49

    def test_clip_covering_image_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            compute_crop_size(40, 40, 1.0, clip_bottom=40)

    def test_zero_crop_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            compute_crop_size(10, 10, 100.0)

    @pytest.mark.parametrize("aspect", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_aspect_raises(self, aspect) -> None:
        with pytest.raises(DegenerateGeometryError):
            compute_crop_size(10, 10, aspect)


def test_full_frame_window_when_crop_covers_image() -> None:
    ch = square_raster(100, 100, 40, 40, 20)
    assert find_co_brightest_roi(ch, ch, 1.0) == Rectangle(0, 0, 100, 100)


def test_vertical_search_picks_first_covering_corner() -> None:
    ch = square_raster(100, 100, 40, 40, 20)
    roi = find_co_brightest_roi(ch, ch, 2.0)
    # every y in [10, 40] covers the square; 12 is the first on the stride-4 grid
    assert roi == Rectangle(0, 12, 100, 50)


def test_horizontal_search_in_wide_image() -> None:
    ch = square_raster(200, 100, 120, 40, 20)
    assert find_co_brightest_roi(ch, ch, 1.0) == Rectangle(40, 0, 100, 100)


@pytest.mark.parametrize("stride, expected_x", [(1, 26), (4, 28)])
def test_stride_controls_candidate_grid(stride, expected_x) -> None:
    values = np.zeros((20, 100), dtype=np.uint8)
    values[:, 41:46] = 255
    ch = gray_raster(values)
    roi = find_co_brightest_roi(ch, ch, 1.0, stride=stride)
    assert roi == Rectangle(expected_x, 0, 20, 20)


def test_clipped_rows_are_never_covered() -> None:
    values = np.zeros((40, 40), dtype=np.uint8)
    values[20:30] = 100
    values[30:40] = 255
    ch = gray_raster(values)
    roi = find_co_brightest_roi(ch, ch, 2.0, clip_bottom=10)
    assert roi == Rectangle(0, 8, 40, 20)
    assert roi.bottom <= 30


def test_both_channels_contribute() -> None:
    # channel 1 prefers the left, channel 2 (much brighter) the right
    ch1 = square_raster(200, 100, 10, 40, 10, value=50)
    ch2 = square_raster(200, 100, 170, 40, 10, value=255)
    roi = find_co_brightest_roi(ch1, ch2, 1.0)
    assert roi.x <= 170 and roi.right >= 180


def test_uniform_image_resolves_to_origin() -> None:
    ch = gray_raster(np.full((60, 90), 80))
    assert find_co_brightest_roi(ch, ch, 1.0) == Rectangle(0, 0, 60, 60)


def test_roi_stays_inside_image(random_raster) -> None:
    for aspect in (0.5, 1.0, 494 / 246, 3.0):
        roi = find_co_brightest_roi(random_raster, random_raster, aspect, clip_bottom=5)
        assert roi.fits_within(random_raster.width, random_raster.height - 5)
        assert roi.w > 0 and roi.h > 0


@pytest.mark.parametrize("target_width, target_height", [(494, 246), (3, 7), (100, 33), (1, 1)])
def test_roi_preserves_target_aspect_ratio(random_raster, target_width, target_height) -> None:
    ratio = target_width / target_height
    roi = find_co_brightest_roi(random_raster, random_raster, ratio, clip_bottom=3)
    if roi.w == random_raster.width:
        # width-constrained: height is the floor of width / ratio
        assert abs(roi.h - roi.w / ratio) < 1
    else:
        assert abs(roi.w - roi.h * ratio) < 1
    assert roi.fits_within(random_raster.width, random_raster.height - 3)


def test_size_mismatch_raises() -> None:
    with pytest.raises(DimensionMismatchError):
        find_co_brightest_roi(square_raster(10, 10, 0, 0, 2), square_raster(10, 12, 0, 0, 2), 1.0)


def test_invalid_stride_raises(random_raster) -> None:
    with pytest.raises(ValueError):
        find_co_brightest_roi(random_raster, random_raster, 1.0, stride=0)
