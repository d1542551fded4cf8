"""Detection of blue pixels by their hue, saturation and value."""

from __future__ import annotations

import numpy as np

BLUE_H_MIN = 90
BLUE_H_MAX = 140
BLUE_S_MIN = 30
BLUE_V_MIN = 30

_F255 = np.float32(255.0)
_F60 = np.float32(60.0)
_F6 = np.float32(6.0)
_F2 = np.float32(2.0)
_F4 = np.float32(4.0)
_F360 = np.float32(360.0)
_ZERO = np.float32(0.0)
_ONE = np.float32(1.0)


def _hsv_planes(b, g, r) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert BGR byte planes to OpenCV-range HSV byte planes in single precision."""
    fb = np.asarray(b, dtype=np.float32) / _F255
    fg = np.asarray(g, dtype=np.float32) / _F255
    fr = np.asarray(r, dtype=np.float32) / _F255

    max_val = np.maximum(fb, np.maximum(fg, fr))
    min_val = np.minimum(fb, np.minimum(fg, fr))
    delta = max_val - min_val

    value = (max_val * _F255).astype(np.uint8)

    safe_max = np.where(max_val == _ZERO, _ONE, max_val)
    saturation = np.where(max_val == _ZERO, _ZERO, (delta / safe_max) * _F255)
    saturation = saturation.astype(np.float32).astype(np.uint8)

    safe_delta = np.where(delta == _ZERO, _ONE, delta)
    hue_red = _F60 * np.fmod((fg - fb) / safe_delta, _F6)
    hue_green = _F60 * ((fb - fr) / safe_delta + _F2)
    hue_blue = _F60 * ((fr - fg) / safe_delta + _F4)
    hue = np.where(
        max_val == fr,
        hue_red,
        np.where(max_val == fg, hue_green, hue_blue),
    )
    hue = np.where(delta == _ZERO, _ZERO, hue).astype(np.float32)
    hue = np.where(hue < _ZERO, hue + _F360, hue).astype(np.float32)
    h = (hue / _F2).astype(np.uint8)

    return h, saturation, value


def _check_byte(value: int, name: str) -> int:
    number = int(value)
    if not 0 <= number <= 255:
        raise ValueError(f"{name} must be in 0..255, got {value}")
    return number


def bgr_to_hsv(b: int, g: int, r: int) -> tuple[int, int, int]:
    """Return ``(h, s, v)`` for one BGR pixel, with hue in 0..179 and s, v in 0..255."""
    channels = [_check_byte(b, "b"), _check_byte(g, "g"), _check_byte(r, "r")]
    h, s, v = _hsv_planes(*channels)
    return int(h), int(s), int(v)


def _blue_mask(h: np.ndarray, s: np.ndarray, v: np.ndarray) -> np.ndarray:
    return (h >= BLUE_H_MIN) & (h <= BLUE_H_MAX) & (s >= BLUE_S_MIN) & (v >= BLUE_V_MIN)


def is_blue(b: int, g: int, r: int) -> bool:
    """Return True when the BGR pixel falls in the blue hue band with enough saturation and value."""
    h, s, v = bgr_to_hsv(b, g, r)
    return bool(_blue_mask(np.uint8(h), np.uint8(s), np.uint8(v)))


def count_blue_pixels(image, start_x: int, start_y: int,
                      roi_width: int, roi_height: int) -> int:
    """Count the blue pixels of a BGR byte image inside the given rectangle.

    ``image`` must be a ``(rows, cols, 3)`` uint8 array. The rectangle starts
    at column ``start_x``, row ``start_y`` and must lie inside the image.
    """
    pixels = np.asarray(image)
    if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError("image must be a 3-channel uint8 BGR array")
    if roi_width < 0 or roi_height < 0:
        raise ValueError(f"region size must not be negative, got {roi_width}x{roi_height}")
    if start_x < 0 or start_y < 0:
        raise ValueError(f"region origin must not be negative, got ({start_x}, {start_y})")
    rows, cols = pixels.shape[:2]
    if start_x + roi_width > cols or start_y + roi_height > rows:
        raise ValueError(
            f"region {roi_width}x{roi_height} at ({start_x}, {start_y}) "
            f"does not fit inside image {cols}x{rows}"
        )

    region = pixels[start_y:start_y + roi_height, start_x:start_x + roi_width]
    if region.size == 0:
        return 0
    h, s, v = _hsv_planes(region[..., 0], region[..., 1], region[..., 2])
    return int(np.count_nonzero(_blue_mask(h, s, v)))