# ssdmatch

Find where a small template image sits inside a larger image by minimising
the sum of squared differences (SSD).

Images are NumPy arrays: grayscale as `(rows, cols)` `uint8`, colour as
`(rows, cols, 3)` `uint8` in BGR channel order. Locations are returned as
`(x, y)`, the top-left corner of the best-matching window.

## Modules

- `ssdmatch.ssd`
  - `ssd_scores(image, template)` computes the SSD of the template at every
    valid window position directly and returns a float32 map of shape
    `(rows - trows + 1, cols - tcols + 1)`. Integer input is summed exactly
    in 64 bits.
  - `best_match(scores)` returns the `(x, y)` of the lowest score; ties go to
    the first minimum in row-major order.
- `ssdmatch.integral`
  - `integral_of_squares(image)` builds the float32 summed-area table of the
    squared pixels.
  - `region_sum(table, x, y, kx, ky)` reads the sum over a `kx` by `ky`
    window from such a table, truncated to an integer.
  - `ssd_from_integrals(integral_sq, template_sq_sum, kx, ky, cross_correlation)`
    assembles the SSD map as `S2 - 2 * C + T` from the window sums of squares,
    a cross-correlation map and the template's sum of squares.
- `ssdmatch.fftmatch`
  - `optimal_dft_size(n)` gives the smallest size `>= n` whose prime factors
    are only 2, 3 and 5.
  - `cross_correlation_fft(image, kernel)` computes the valid
    cross-correlation in the frequency domain.
  - `match_template_ssd(image, template)` scales pixels by 1/255, combines the
    summed-area table and the FFT cross-correlation into an SSD map and
    returns the location of its minimum.
  - `compare_images(image1, image2, tolerance=1e-5)` tells whether two arrays
    share shape and dtype and differ by at most `tolerance`.
- `ssdmatch.color`
  - `bgr_to_hsv(b, g, r)` converts one pixel to HSV with hue in `0..179` and
    saturation and value in `0..255`.
  - `is_blue(b, g, r)` is true for hue `90..140` with saturation and value of
    at least 30.
  - `count_blue_pixels(image, start_x, start_y, roi_width, roi_height)` counts
    such pixels in a rectangle of a BGR image.
- `ssdmatch.enhance`
  - `gaussian_blur(image, ksize=15)` blurs with a square Gaussian kernel of
    odd size, mirroring the borders.
  - `remove_reflections(image)` subtracts a 15x15 blur from a grayscale image
    and stretches the remaining detail to `0..255`.
  - `increase_saturation(image, factor)` multiplies the HSV saturation of a
    BGR image, capped at 255.
  - `color_matching(min_loc, image, template_image)` boosts the image's
    saturation by 100 and counts pixels in the BGR range
    `(100, 0, 0)..(255, 100, 255)`, over rows from `min_loc[0]` up to the
    template's row count and columns from `min_loc[1]` up to the template's
    column count.
- `ssdmatch.cli`
  - `load_image(path, grayscale=False)`, `to_gray(image)` and
    `draw_rectangle(image, top_left, size, color, thickness)` are the helpers
    the command uses; `main(argv=None)` runs it.

Functions raise `ValueError` for arrays of the wrong shape or type, and for
templates or regions that do not fit inside the image.

## Installation

    pip install .

## Usage

    import numpy as np
    from ssdmatch.fftmatch import match_template_ssd

    image = np.random.default_rng(0).integers(0, 256, (120, 160), dtype=np.uint8)
    template = image[40:60, 70:100]
    x, y = match_template_ssd(image, template)   # (70, 40)

## Command line

    ssdmatch SOURCE TEMPLATE

loads both images, converts them to grayscale, finds the template in the
source and writes the source image with a green rectangle, two pixels wide,
around the match. It prints the image sizes, the matching time in
milliseconds and the match position.

Options:

- `-o`, `--output PATH` — where to write the marked image (default `Result.jpg`).
- `-s`, `--scale FACTOR` — resize both grayscale images before matching; the
  found position is scaled back (default `1.0`).
- `--method {fft,direct}` — compute the SSD through the FFT and the
  summed-area table (default) or directly.
- `--remove-reflections` — apply `remove_reflections` to both images before
  matching.
- `--count-blue` — run `color_matching` at the found position and report the
  number of blue pixels.

The command exits with status 1 when an image cannot be read or the template
does not fit inside the source.

## Limitations

The command does not open any window to show its results; the marked image is
only written to the output file. Image files are read and written through
Pillow, so only formats Pillow supports can be used.

## Tests

    pip install .[test]
    pytest