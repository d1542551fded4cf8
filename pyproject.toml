[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ssdmatch"
version = "0.1.0"
description = "Template matching by sum of squared differences, with FFT cross-correlation, integral images and blue-pixel colour checks"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pillow",
]
keywords = ["template matching", "ssd", "image processing", "fft", "integral image", "computer vision"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = [
    "pytest",
    "numpy",
    "pillow",
]

[project.scripts]
ssdmatch = "ssdmatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ssdmatch"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
