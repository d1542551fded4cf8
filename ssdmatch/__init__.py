"""Template matching by sum of squared differences, with FFT, integral-image and colour helpers."""

__version__ = "0.1.0"

__all__ = ["ssd", "integral", "fftmatch", "color", "enhance", "cli"]