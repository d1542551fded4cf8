"""Image enhancement steps: blurring, reflection removal, saturation boost and blue counting."""

from __future__ import annotations

import numpy as np

REFLECTION_BLUR_SIZE = 15
COLOR_MATCH_SATURATION = 100.0

# Blue range in BGR used when counting pixels inside the matched area.
LOWER_BLUE = (100, 0, 0)
UPPER_BLUE = (255, 100, 255)

# Fixed kernels used for small apertures when no sigma is given.
_SMALL_KERNELS = {
    1: (1.0,),
    3: (0.25, 0.5, 0.25),
    5: (0.0625, 0.25, 0.375, 0.25, 0.0625),
    7: (0.03125, 0.109375, 0.21875, 0.28125, 0.21875, 0.109375, 0.03125),
}


def _gaussian_kernel(ksize: int) -> np.ndarray:
    if ksize in _SMALL_KERNELS:
        return np.array(_SMALL_KERNELS[ksize], dtype=np.float64)
    sigma = 0.3 * ((ksize - 1) * 0.5 - 1) + 0.8
    offsets = np.arange(ksize, dtype=np.float64) - (ksize - 1) / 2.0
    weights = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return weights / weights.sum()


def _convolve_axis(data: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    radius = len(kernel) // 2
    if radius == 0:
        return data * kernel[0]
    pad = [(0, 0)] * data.ndim
    pad[axis] = (radius, radius)
    padded = np.pad(data, pad, mode="reflect")
    length = data.shape[axis]
    out = np.zeros(data.shape, dtype=np.float64)
    for offset, weight in enumerate(kernel):
        out += weight * np.take(padded, np.arange(offset, offset + length), axis=axis)
    return out


def gaussian_blur(image, ksize: int = REFLECTION_BLUR_SIZE) -> np.ndarray:
    """Blur with a square Gaussian kernel of odd size ``ksize``.

    The sigma is derived from the aperture, borders are mirrored without
    repeating the edge pixel, and uint8 input gives rounded uint8 output;
    other input gives float32.
    """
    pixels = np.asarray(image)
    if pixels.ndim not in (2, 3):
        raise ValueError(f"image must have 2 or 3 dimensions, got {pixels.ndim}")
    if pixels.size == 0:
        raise ValueError("image must not be empty")
    if ksize < 1 or ksize % 2 == 0:
        raise ValueError(f"kernel size must be a positive odd number, got {ksize}")

    kernel = _gaussian_kernel(ksize)
    blurred = _convolve_axis(pixels.astype(np.float64), kernel, axis=0)
    blurred = _convolve_axis(blurred, kernel, axis=1)
    if pixels.dtype == np.uint8:
        return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)
    return blurred.astype(np.float32)


def _require_gray_bytes(image, name: str) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.dtype != np.uint8 or pixels.ndim != 2:
        raise ValueError(f"{name} must be a 2-D uint8 grayscale array")
    if pixels.size == 0:
        raise ValueError(f"{name} must not be empty")
    return pixels


def _require_bgr_bytes(image, name: str) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.size == 0:
        raise ValueError(f"{name} must not be empty")
    if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"{name} must be a 3-channel uint8 BGR array")
    return pixels


def remove_reflections(image) -> np.ndarray:
    """Keep the high-frequency detail of a grayscale image, stretched to 0..255.

    The image is blurred with a 15x15 Gaussian, the blur is subtracted with
    saturation at zero, and the difference is min-max normalised. A flat
    difference normalises to all zeros.
    """
    pixels = _require_gray_bytes(image, "image")
    blurred = gaussian_blur(pixels, REFLECTION_BLUR_SIZE)
    high = np.clip(pixels.astype(np.int32) - blurred.astype(np.int32), 0, 255)

    low_value = int(high.min())
    high_value = int(high.max())
    if high_value - low_value <= 0:
        return np.zeros_like(pixels)
    scale = 255.0 / (high_value - low_value)
    stretched = (high - low_value) * scale
    return np.clip(np.rint(stretched), 0, 255).astype(np.uint8)


def _bgr_to_hsv(pixels: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    bgr = pixels.astype(np.float64)
    b, g, r = bgr[..., 0], bgr[..., 1], bgr[..., 2]
    v = np.maximum(b, np.maximum(g, r))
    low = np.minimum(b, np.minimum(g, r))
    delta = v - low

    safe_v = np.where(v > 0, v, 1.0)
    s = np.where(v > 0, delta * 255.0 / safe_v, 0.0)

    safe_delta = np.where(delta > 0, delta, 1.0)
    hue = np.where(
        v == r,
        60.0 * (g - b) / safe_delta,
        np.where(v == g, 120.0 + 60.0 * (b - r) / safe_delta,
                 240.0 + 60.0 * (r - g) / safe_delta),
    )
    hue = np.where(delta > 0, hue, 0.0)
    hue = np.where(hue < 0, hue + 360.0, hue)
    h = np.rint(hue / 2.0)
    h = np.where(h >= 180, h - 180, h)
    return h, np.rint(s), v


def _hsv_to_bgr(h: np.ndarray, s: np.ndarray, v: np.ndarray) -> np.ndarray:
    sector_pos = (h * 2.0) / 60.0
    floor = np.floor(sector_pos)
    frac = sector_pos - floor
    sector = floor.astype(np.int64) % 6
    sat = s / 255.0

    p = v * (1.0 - sat)
    q = v * (1.0 - sat * frac)
    t = v * (1.0 - sat * (1.0 - frac))

    r = np.choose(sector, [v, q, p, p, t, v])
    g = np.choose(sector, [t, v, v, q, p, p])
    b = np.choose(sector, [p, p, t, v, v, q])
    bgr = np.stack([b, g, r], axis=-1)
    return np.clip(np.rint(bgr), 0, 255).astype(np.uint8)


def increase_saturation(image, factor: float) -> np.ndarray:
    """Return a BGR image whose HSV saturation is multiplied by ``factor`` and capped at 255."""
    pixels = _require_bgr_bytes(image, "image")
    h, s, v = _bgr_to_hsv(pixels)
    boosted = np.clip(np.rint(s * factor), 0, 255)
    return _hsv_to_bgr(h, boosted, v)


def color_matching(min_loc, image, template_image) -> int:
    """Count strongly blue pixels of the saturated image near the match.

    Rows run from ``min_loc[0]`` up to the template's row count and columns
    from ``min_loc[1]`` up to the template's column count, after the image's
    saturation is multiplied by 100.
    """
    pixels = _require_bgr_bytes(image, "image")
    template = np.asarray(template_image)
    if template.ndim < 2:
        raise ValueError("template_image must be an image array")
    start_row, start_col = int(min_loc[0]), int(min_loc[1])
    if start_row < 0 or start_col < 0:
        raise ValueError(f"location must not be negative, got ({start_row}, {start_col})")
    end_row, end_col = template.shape[0], template.shape[1]
    rows, cols = pixels.shape[:2]
    if end_row > rows or end_col > cols:
        raise ValueError(
            f"template {end_col}x{end_row} reaches outside image {cols}x{rows}"
        )

    saturated = increase_saturation(pixels, COLOR_MATCH_SATURATION)
    region = saturated[start_row:end_row, start_col:end_col]
    if region.size == 0:
        return 0
    lower = np.array(LOWER_BLUE, dtype=np.uint8)
    upper = np.array(UPPER_BLUE, dtype=np.uint8)
    inside = np.all((region >= lower) & (region <= upper), axis=-1)
    return int(np.count_nonzero(inside))