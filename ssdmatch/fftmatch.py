"""Cross-correlation in the frequency domain and SSD matching built on it."""

from __future__ import annotations

import numpy as np

from .integral import integral_of_squares, ssd_from_integrals
from .ssd import best_match

_SMOOTH_PRIMES = (2, 3, 5)


def _is_smooth(value: int) -> bool:
    for prime in _SMOOTH_PRIMES:
        while value % prime == 0:
            value //= prime
    return value == 1


def optimal_dft_size(n: int) -> int:
    """Return the smallest size ``>= n`` whose only prime factors are 2, 3 and 5."""
    if n < 1:
        raise ValueError(f"DFT size must be positive, got {n}")
    size = n
    while not _is_smooth(size):
        size += 1
    return size


def _as_plane(array, name: str) -> np.ndarray:
    plane = np.asarray(array)
    if plane.ndim != 2:
        raise ValueError(f"{name} must be a 2-D array, got {plane.ndim} dimensions")
    if plane.size == 0:
        raise ValueError(f"{name} must not be empty")
    return plane


def _check_fits(image: np.ndarray, kernel: np.ndarray) -> None:
    rows, cols = image.shape
    krows, kcols = kernel.shape
    if krows > rows or kcols > cols:
        raise ValueError(
            f"kernel {kcols}x{krows} does not fit inside image {cols}x{rows}"
        )


def cross_correlation_fft(image, kernel) -> np.ndarray:
    """Return the valid cross-correlation of ``kernel`` over ``image``.

    Entry ``[i, j]`` is the sum of ``image[i + y, j + x] * kernel[y, x]``
    over the kernel. Both arrays are zero-padded to 2-3-5 smooth sizes large
    enough to avoid wrap-around, multiplied in the frequency domain with the
    kernel's spectrum conjugated, and transformed back. The result is float32
    with shape ``(rows - krows + 1, cols - kcols + 1)``.
    """
    img = _as_plane(image, "image").astype(np.float32)
    ker = _as_plane(kernel, "kernel").astype(np.float32)
    _check_fits(img, ker)

    rows, cols = img.shape
    krows, kcols = ker.shape
    m = optimal_dft_size(rows + krows - 1)
    n = optimal_dft_size(cols + kcols - 1)

    image_spectrum = np.fft.fft2(img, s=(m, n))
    kernel_spectrum = np.fft.fft2(ker, s=(m, n))
    product = image_spectrum * np.conj(kernel_spectrum)
    full = np.real(np.fft.ifft2(product))

    valid = full[: rows - krows + 1, : cols - kcols + 1]
    return valid.astype(np.float32)


def compare_images(image1, image2, tolerance: float = 1e-5) -> bool:
    """Return True when both arrays share shape and dtype and differ by at most ``tolerance``."""
    first = np.asarray(image1)
    second = np.asarray(image2)
    if first.shape != second.shape or first.dtype != second.dtype:
        return False
    if first.size == 0:
        return True
    diff = np.abs(first.astype(np.float64) - second.astype(np.float64))
    return float(diff.max()) <= tolerance


def _normalise(array) -> np.ndarray:
    return (np.asarray(array, dtype=np.float64) / 255.0).astype(np.float32)


def match_template_ssd(image, template) -> tuple[int, int]:
    """Return the ``(x, y)`` top-left corner where ``template`` best matches ``image``.

    Pixels are scaled by 1/255, the SSD map is assembled from the summed-area
    table of squares and the FFT cross-correlation, and its minimum is taken.
    """
    img = _as_plane(image, "image")
    tmpl = _as_plane(template, "template")
    _check_fits(img, tmpl)

    image_n = _normalise(img)
    template_n = _normalise(tmpl)
    ky, kx = template_n.shape

    template_sq_sum = integral_of_squares(template_n)[ky - 1, kx - 1]
    integral_sq = integral_of_squares(image_n)
    correlation = cross_correlation_fft(image_n, template_n)

    scores = ssd_from_integrals(integral_sq, template_sq_sum, kx, ky, correlation)
    return best_match(scores)