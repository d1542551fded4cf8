"""Command that locates a template in an image and writes the marked result."""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np
from PIL import Image

from .enhance import color_matching, remove_reflections
from .fftmatch import match_template_ssd
from .ssd import best_match, ssd_scores

MATCH_COLOR = (0, 255, 0)
MATCH_THICKNESS = 2


def load_image(path, grayscale: bool = False) -> np.ndarray:
    """Read an image file as a uint8 grayscale plane or a ``(rows, cols, 3)`` BGR array."""
    with Image.open(path) as picture:
        if grayscale:
            return np.array(picture.convert("L"), dtype=np.uint8)
        rgb = np.asarray(picture.convert("RGB"), dtype=np.uint8)
    return np.ascontiguousarray(rgb[..., ::-1])


def _save_image(path, image: np.ndarray) -> None:
    pixels = np.asarray(image, dtype=np.uint8)
    if pixels.ndim == 3:
        pixels = np.ascontiguousarray(pixels[..., ::-1])
    Image.fromarray(pixels).save(path)


def to_gray(image) -> np.ndarray:
    """Return the luma of a BGR image as uint8; a 2-D image is returned as a copy."""
    pixels = np.asarray(image)
    if pixels.ndim == 2:
        return pixels.astype(np.uint8, copy=True)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError("image must be a 2-D plane or a 3-channel BGR array")
    bgr = pixels.astype(np.float64)
    luma = 0.114 * bgr[..., 0] + 0.587 * bgr[..., 1] + 0.299 * bgr[..., 2]
    return np.clip(np.rint(luma), 0, 255).astype(np.uint8)


def draw_rectangle(image, top_left, size, color=MATCH_COLOR,
                   thickness: int = MATCH_THICKNESS) -> np.ndarray:
    """Return a copy of ``image`` with a rectangle outline drawn on it.

    The rectangle covers ``size = (width, height)`` pixels from ``top_left =
    (x, y)``; each edge is a band ``thickness`` pixels wide, starting
    ``thickness // 2`` pixels before the edge. Parts outside the image are
    clipped.
    """
    canvas = np.array(image, copy=True)
    x, y = int(top_left[0]), int(top_left[1])
    width, height = int(size[0]), int(size[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"rectangle size must be positive, got {width}x{height}")
    if thickness < 1:
        raise ValueError(f"thickness must be positive, got {thickness}")

    fill = np.asarray(color, dtype=canvas.dtype)
    if canvas.ndim == 2:
        fill = fill.ravel()[0]

    rows, cols = canvas.shape[:2]
    lead = thickness // 2
    x2, y2 = x + width - 1, y + height - 1

    def span(start: int, stop: int, limit: int) -> slice:
        return slice(min(max(start, 0), limit), min(max(stop, 0), limit))

    across = span(x - lead, x2 - lead + thickness, cols)
    down = span(y - lead, y2 - lead + thickness, rows)
    for edge in (y, y2):
        canvas[span(edge - lead, edge - lead + thickness, rows), across] = fill
    for edge in (x, x2):
        canvas[down, span(edge - lead, edge - lead + thickness, cols)] = fill
    return canvas


def _resize(plane: np.ndarray, scale: float) -> np.ndarray:
    if scale == 1.0:
        return plane
    rows, cols = plane.shape
    new_size = (max(1, round(cols * scale)), max(1, round(rows * scale)))
    resized = Image.fromarray(plane).resize(new_size, Image.BILINEAR)
    return np.asarray(resized, dtype=np.uint8)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssdmatch",
        description="Find a template in an image by the sum of squared differences.",
    )
    parser.add_argument("image", help="image to search in")
    parser.add_argument("template", help="template to look for")
    parser.add_argument("-o", "--output", default="Result.jpg",
                        help="where to write the image with the match marked")
    parser.add_argument("-s", "--scale", type=float, default=1.0,
                        help="resize factor applied before matching")
    parser.add_argument("--method", choices=("fft", "direct"), default="fft",
                        help="compute the SSD via FFT and integrals or directly")
    parser.add_argument("--remove-reflections", action="store_true",
                        help="keep only high-frequency detail before matching")
    parser.add_argument("--count-blue", action="store_true",
                        help="count blue pixels around the match")
    return parser


def main(argv=None) -> int:
    """Run the matcher; return 0 on success and 1 when images cannot be used."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.scale <= 0:
        parser.error("scale must be positive")

    try:
        image = load_image(args.image)
        template = load_image(args.template)
    except OSError as exc:
        print(f"error: cannot load images: {exc}", file=sys.stderr)
        return 1

    gray_image = to_gray(image)
    gray_template = to_gray(template)
    print(f"image size: {gray_image.shape[1]}x{gray_image.shape[0]}")
    print(f"template size: {gray_template.shape[1]}x{gray_template.shape[0]}")

    gray_image = _resize(gray_image, args.scale)
    gray_template = _resize(gray_template, args.scale)
    print(f"resized image: {gray_image.shape[1]}x{gray_image.shape[0]}")
    print(f"resized template: {gray_template.shape[1]}x{gray_template.shape[0]}")

    try:
        if args.remove_reflections:
            started = time.perf_counter()
            gray_image = remove_reflections(gray_image)
            gray_template = remove_reflections(gray_template)
            elapsed = (time.perf_counter() - started) * 1000.0
            print(f"reflection removal time (ms): {elapsed:.0f}")

        started = time.perf_counter()
        if args.method == "fft":
            location = match_template_ssd(gray_image, gray_template)
        else:
            location = best_match(ssd_scores(gray_image, gray_template))
        elapsed = (time.perf_counter() - started) * 1000.0
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"template matching time (ms): {elapsed:.0f}")

    x = int(location[0] / args.scale)
    y = int(location[1] / args.scale)
    print(f"best match at x={x}, y={y}")

    if args.count_blue:
        try:
            blue = color_matching((x, y), image, template)
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        outcome = "positive" if blue > 0 else "negative"
        print(f"{outcome}: found {blue} blue pixels")

    marked = draw_rectangle(image, (x, y), (template.shape[1], template.shape[0]),
                            MATCH_COLOR, MATCH_THICKNESS)
    _save_image(args.output, marked)
    return 0


if __name__ == "__main__":
    sys.exit(main())