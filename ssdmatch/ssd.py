"""Direct sum-of-squared-differences template matching on grayscale images."""

from __future__ import annotations

import numpy as np


def _as_plane(array, name: str) -> np.ndarray:
    plane = np.asarray(array)
    if plane.ndim != 2:
        raise ValueError(f"{name} must be a 2-D grayscale array, got {plane.ndim} dimensions")
    if plane.size == 0:
        raise ValueError(f"{name} must not be empty")
    if np.issubdtype(plane.dtype, np.integer) or plane.dtype == np.bool_:
        return plane.astype(np.int64)
    return plane.astype(np.float64)


def ssd_scores(image, template) -> np.ndarray:
    """Return the SSD score of the template at every valid position in the image.

    The result has shape ``(rows - trows + 1, cols - tcols + 1)`` and dtype
    float32; entry ``[i, j]`` is the sum of squared differences between the
    template and the image window whose top-left corner is row ``i``, column
    ``j``. Integer inputs are summed exactly in 64 bits before conversion, so
    large templates do not overflow.
    """
    img = _as_plane(image, "image")
    tmpl = _as_plane(template, "template")

    rows, cols = img.shape
    trows, tcols = tmpl.shape
    if trows > rows or tcols > cols:
        raise ValueError(
            f"template {tcols}x{trows} does not fit inside image {cols}x{rows}"
        )

    out_rows = rows - trows + 1
    out_cols = cols - tcols + 1
    accumulator = np.zeros((out_rows, out_cols), dtype=np.result_type(img, tmpl))

    # Accumulate one template pixel at a time over all window positions.
    for (dy, dx), value in np.ndenumerate(tmpl):
        window = img[dy:dy + out_rows, dx:dx + out_cols]
        diff = window - value
        accumulator += diff * diff

    return accumulator.astype(np.float32)


def best_match(scores) -> tuple[int, int]:
    """Return the ``(x, y)`` position of the lowest score.

    Ties resolve to the first minimum in row-major order.
    """
    grid = np.asarray(scores)
    if grid.ndim != 2:
        raise ValueError(f"scores must be a 2-D array, got {grid.ndim} dimensions")
    if grid.size == 0:
        raise ValueError("scores must not be empty")
    row, col = np.unravel_index(int(np.argmin(grid)), grid.shape)
    return int(col), int(row)