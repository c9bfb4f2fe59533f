"""Cost maps, coefficient selection, spreading vectors, DFT templates, resampling and repetition coding for JPEG steganography."""

__version__ = "0.1.0"

__all__ = [
    "capacity",
    "cost",
    "repetition",
    "resample",
    "selection",
    "spreading",
    "template",
    "uerd",
    "uniward",
    "wavelet",
]