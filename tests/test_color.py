import itertools

import numpy as np
import pytest

from ssdmatch.color import (
    BLUE_H_MAX,
    BLUE_H_MIN,
    BLUE_S_MIN,
    BLUE_V_MIN,
    bgr_to_hsv,
    count_blue_pixels,
    is_blue,
)

_LEVELS = (0, 17, 64, 128, 200, 255)


def _grid():
    return list(itertools.product(_LEVELS, repeat=3))


def _random_image(rows=12, cols=15, seed=3):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(rows, cols, 3), dtype=np.uint8)


def test_pure_blue_hsv():
    assert bgr_to_hsv(255, 0, 0) == (120, 255, 255)


def test_black_is_all_zero():
    assert bgr_to_hsv(0, 0, 0) == (0, 0, 0)


@pytest.mark.parametrize("level", [1, 50, 128, 255])
def test_gray_has_no_saturation_or_hue(level):
    h, s, v = bgr_to_hsv(level, level, level)
    assert h == 0
    assert s == 0
    assert v == level


def test_hsv_ranges_hold_over_grid():
    for b, g, r in _grid():
        h, s, v = bgr_to_hsv(b, g, r)
        assert 0 <= h < 180
        assert 0 <= s <= 255
        assert v == max(b, g, r)


def test_pure_blue_is_blue_and_red_is_not():
    assert is_blue(255, 0, 0) is True
    assert is_blue(0, 0, 255) is False
    assert is_blue(0, 0, 0) is False


def test_is_blue_agrees_with_thresholds():
    for b, g, r in _grid():
        h, s, v = bgr_to_hsv(b, g, r)
        expected = BLUE_H_MIN <= h <= BLUE_H_MAX and s >= BLUE_S_MIN and v >= BLUE_V_MIN
        assert is_blue(b, g, r) == expected


@pytest.mark.parametrize("channels", [(-1, 0, 0), (0, 256, 0), (0, 0, 300)])
def test_bgr_to_hsv_rejects_out_of_range(channels):
    with pytest.raises(ValueError):
        bgr_to_hsv(*channels)


def test_count_matches_per_pixel_checks():
    image = _random_image()
    x, y, w, h = 2, 3, 9, 7
    expected = sum(
        is_blue(*(int(c) for c in image[row, col]))
        for row in range(y, y + h)
        for col in range(x, x + w)
    )
    assert count_blue_pixels(image, x, y, w, h) == expected


def test_count_whole_blue_image():
    image = np.zeros((4, 5, 3), dtype=np.uint8)
    image[..., 0] = 255
    assert count_blue_pixels(image, 0, 0, 5, 4) == 20
    assert count_blue_pixels(image, 1, 1, 2, 3) == 6


def test_count_ignores_pixels_outside_region():
    image = np.zeros((6, 6, 3), dtype=np.uint8)
    image[0, 0] = (255, 0, 0)
    image[5, 5] = (255, 0, 0)
    assert count_blue_pixels(image, 1, 1, 4, 4) == 0
    assert count_blue_pixels(image, 0, 0, 6, 6) == 2


def test_count_empty_region_is_zero():
    image = _random_image()
    assert count_blue_pixels(image, 4, 4, 0, 3) == 0


def test_count_is_additive_over_split_regions():
    image = _random_image(seed=11)
    whole = count_blue_pixels(image, 0, 0, 15, 12)
    left = count_blue_pixels(image, 0, 0, 6, 12)
    right = count_blue_pixels(image, 6, 0, 9, 12)
    assert whole == left + right


def test_count_rejects_wrong_format():
    gray = np.zeros((4, 4), dtype=np.uint8)
    with pytest.raises(ValueError):
        count_blue_pixels(gray, 0, 0, 2, 2)
    floats = np.zeros((4, 4, 3), dtype=np.float32)
    with pytest.raises(ValueError):
        count_blue_pixels(floats, 0, 0, 2, 2)


@pytest.mark.parametrize(
    "roi",
    [(-1, 0, 2, 2), (0, -1, 2, 2), (3, 0, 2, 2), (0, 3, 2, 2), (0, 0, -1, 2)],
)
def test_count_rejects_bad_region(roi):
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    with pytest.raises(ValueError):
        count_blue_pixels(image, *roi)