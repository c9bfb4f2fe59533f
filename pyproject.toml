[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "phasm"
version = "0.1.0"
description = "Building blocks for JPEG steganography: embedding cost maps, spreading vectors, DFT templates, resampling and repetition coding"
requires-python = ">=3.10"
keywords = ["steganography", "jpeg", "dct", "wavelet", "uniward", "uerd", "stdm", "chacha20"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
    "numpy",
]

[tool.hatch.build.targets.wheel]
packages = ["phasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
