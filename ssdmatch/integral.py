"""Summed-area tables of squared pixels and SSD scores derived from them."""

from __future__ import annotations

import numpy as np


def _as_float_plane(array, name: str) -> np.ndarray:
    plane = np.asarray(array)
    if plane.ndim != 2:
        raise ValueError(f"{name} must be a 2-D array, got {plane.ndim} dimensions")
    if plane.size == 0:
        raise ValueError(f"{name} must not be empty")
    return plane.astype(np.float32)


def _check_window(shape: tuple[int, int], x: int, y: int, kx: int, ky: int) -> None:
    height, width = shape
    if kx < 1 or ky < 1:
        raise ValueError(f"window size must be positive, got {kx}x{ky}")
    if x < 0 or y < 0:
        raise ValueError(f"window origin must not be negative, got ({x}, {y})")
    if x + kx > width or y + ky > height:
        raise ValueError(
            f"window {kx}x{ky} at ({x}, {y}) does not fit inside table {width}x{height}"
        )


def integral_of_squares(image) -> np.ndarray:
    """Return the float32 summed-area table of the squared pixel values.

    Entry ``[y, x]`` holds the sum of ``image[r, c] ** 2`` over all
    ``r <= y`` and ``c <= x``. Rows are accumulated left to right in single
    precision and then added onto the row above.
    """
    plane = _as_float_plane(image, "image")
    squares = plane * plane
    row_sums = np.cumsum(squares, axis=1, dtype=np.float32)
    return np.cumsum(row_sums, axis=0, dtype=np.float32)


def region_sum(table, x: int, y: int, kx: int, ky: int) -> int:
    """Return the sum over the ``kx`` by ``ky`` window whose top-left is ``(x, y)``.

    The four corner lookups are combined in single precision and the result
    is truncated toward zero to an integer.
    """
    grid = _as_float_plane(table, "table")
    _check_window(grid.shape, x, y, kx, ky)

    x1, y1 = x - 1, y - 1
    x2, y2 = x + kx - 1, y + ky - 1
    zero = np.float32(0.0)
    a = grid[y1, x1] if x1 >= 0 and y1 >= 0 else zero
    b = grid[y1, x2] if y1 >= 0 else zero
    c = grid[y2, x1] if x1 >= 0 else zero
    d = grid[y2, x2]
    return int(np.trunc(np.float32(np.float32(np.float32(d - b) - c) + a)))


def ssd_from_integrals(integral_sq, template_sq_sum, kx: int, ky: int,
                       cross_correlation) -> np.ndarray:
    """Return the SSD map ``S2 - 2 * C + T`` for every window position.

    ``S2`` is the window sum read from ``integral_sq`` (truncated to an
    integer, as :func:`region_sum` does), ``C`` the matching entry of
    ``cross_correlation`` and ``T`` the template's sum of squares. The result
    is float32 with shape ``(height - ky + 1, width - kx + 1)``.
    """
    grid = _as_float_plane(integral_sq, "integral_sq")
    height, width = grid.shape
    _check_window(grid.shape, 0, 0, kx, ky)

    out_rows = height - ky + 1
    out_cols = width - kx + 1
    corr = np.asarray(cross_correlation)
    if corr.ndim != 2:
        raise ValueError(
            f"cross_correlation must be a 2-D array, got {corr.ndim} dimensions"
        )
    if corr.shape[0] < out_rows or corr.shape[1] < out_cols:
        raise ValueError(
            f"cross_correlation {corr.shape[1]}x{corr.shape[0]} is smaller than "
            f"the {out_cols}x{out_rows} result"
        )
    corr = corr[:out_rows, :out_cols].astype(np.float32)

    # A zero row and column in front make the border lookups read as 0.
    padded = np.zeros((height + 1, width + 1), dtype=np.float32)
    padded[1:, 1:] = grid
    d = padded[ky:ky + out_rows, kx:kx + out_cols]
    b = padded[0:out_rows, kx:kx + out_cols]
    c = padded[ky:ky + out_rows, 0:out_cols]
    a = padded[0:out_rows, 0:out_cols]
    s2 = np.trunc(((d - b) - c) + a).astype(np.float32)

    t = np.float32(template_sq_sum)
    return ((s2 - np.float32(2.0) * corr) + t).astype(np.float32)