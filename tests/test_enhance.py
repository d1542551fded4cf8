import numpy as np
import pytest

from ssdmatch.enhance import (
    color_matching,
    gaussian_blur,
    increase_saturation,
    remove_reflections,
)


def _solid(rows, cols, bgr):
    image = np.zeros((rows, cols, 3), dtype=np.uint8)
    image[...] = bgr
    return image


def test_blur_keeps_constant_image():
    image = np.full((20, 25), 77, dtype=np.uint8)
    assert np.array_equal(gaussian_blur(image, 15), image)


def test_blur_size_one_is_identity():
    rng = np.random.default_rng(1)
    image = rng.integers(0, 256, size=(9, 11), dtype=np.uint8)
    assert np.array_equal(gaussian_blur(image, 1), image)


def test_blur_three_spreads_impulse():
    image = np.zeros((5, 5), dtype=np.float32)
    image[2, 2] = 100.0
    blurred = gaussian_blur(image, 3)
    assert blurred[2, 2] == pytest.approx(25.0)
    assert blurred.sum() == pytest.approx(100.0)
    assert np.allclose(blurred, blurred.T)


def test_blur_preserves_shape_of_colour_image():
    rng = np.random.default_rng(2)
    image = rng.integers(0, 256, size=(12, 14, 3), dtype=np.uint8)
    blurred = gaussian_blur(image, 5)
    assert blurred.shape == image.shape
    assert blurred.dtype == np.uint8


@pytest.mark.parametrize("size", [0, 4, -3])
def test_blur_rejects_bad_kernel(size):
    with pytest.raises(ValueError):
        gaussian_blur(np.zeros((5, 5), dtype=np.uint8), size)


def test_remove_reflections_flat_image_is_zero():
    image = np.full((30, 30), 200, dtype=np.uint8)
    result = remove_reflections(image)
    assert result.shape == image.shape
    assert not result.any()


def test_remove_reflections_stretches_to_full_range():
    rng = np.random.default_rng(3)
    image = rng.integers(0, 256, size=(40, 35), dtype=np.uint8)
    result = remove_reflections(image)
    assert result.shape == image.shape
    assert int(result.min()) == 0
    assert int(result.max()) == 255


def test_remove_reflections_rejects_colour():
    with pytest.raises(ValueError):
        remove_reflections(np.zeros((5, 5, 3), dtype=np.uint8))


def test_saturation_keeps_gray_pixels():
    image = _solid(4, 4, (120, 120, 120))
    assert np.array_equal(increase_saturation(image, 50.0), image)


def test_saturation_factor_one_round_trips():
    image = np.array([[[200, 100, 50], [30, 180, 90], [255, 0, 0]]], dtype=np.uint8)
    result = increase_saturation(image, 1.0)
    diff = np.abs(result.astype(int) - image.astype(int))
    assert diff.max() <= 2


def test_saturation_boost_keeps_value_and_drops_minimum():
    image = _solid(2, 3, (200, 100, 50))
    result = increase_saturation(image, 100.0)
    assert result.shape == (2, 3, 3)
    np.testing.assert_array_equal(result.max(axis=-1), np.full((2, 3), 200))
    np.testing.assert_array_equal(result.min(axis=-1), np.zeros((2, 3)))


def test_saturation_rejects_empty():
    with pytest.raises(ValueError):
        increase_saturation(np.zeros((0, 0, 3), dtype=np.uint8), 2.0)


def test_color_matching_counts_whole_template_area():
    image = _solid(10, 10, (255, 0, 0))
    template = _solid(5, 5, (255, 0, 0))
    assert color_matching((0, 0), image, template) == 25


def test_color_matching_starts_at_location():
    image = _solid(10, 10, (255, 0, 0))
    template = _solid(5, 5, (255, 0, 0))
    assert color_matching((2, 1), image, template) == 3 * 4


def test_color_matching_ignores_red():
    image = _solid(8, 8, (0, 0, 255))
    template = _solid(4, 4, (0, 0, 255))
    assert color_matching((0, 0), image, template) == 0


def test_color_matching_past_template_is_zero():
    image = _solid(8, 8, (255, 0, 0))
    template = _solid(3, 3, (255, 0, 0))
    assert color_matching((5, 5), image, template) == 0


def test_color_matching_rejects_empty_image():
    with pytest.raises(ValueError):
        color_matching((0, 0), np.zeros((0, 0, 3), dtype=np.uint8), _solid(2, 2, (0, 0, 0)))


def test_color_matching_rejects_oversized_template():
    with pytest.raises(ValueError):
        color_matching((0, 0), _solid(4, 4, (255, 0, 0)), _solid(6, 6, (255, 0, 0)))