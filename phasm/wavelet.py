"""Undecimated db8 wavelet decomposition used by the J-UNIWARD cost."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

FILT_LEN = 16
"""Number of taps of the 1D wavelet filters."""

HPDF = np.array(
    [
        -0.0544158422,
        0.3128715909,
        -0.6756307363,
        0.5853546837,
        0.0158291053,
        -0.2840155430,
        -0.0004724846,
        0.1287474266,
        0.0173693010,
        -0.0440882539,
        -0.0139810279,
        0.0087460940,
        0.0048703530,
        -0.0003917404,
        -0.0006754494,
        -0.0001174768,
    ],
    dtype=np.float64,
)
"""Daubechies 8 high-pass decomposition filter."""

_HALF = (FILT_LEN - 1) // 2


def lpdf():
    """Return the db8 low-pass decomposition filter.

    Derived from :data:`HPDF` by the QMF relation
    ``lpdf[n] = (-1)**n * hpdf[N - 1 - n]``.
    """
    signs = np.where(np.arange(FILT_LEN) % 2 == 0, 1.0, -1.0)
    return signs * HPDF[::-1]


def mirror_index(idx, size):
    """Reflect ``idx`` into ``[0, size - 1]`` about the boundaries."""
    if idx < 0:
        return min(-idx, size - 1)
    if idx >= size:
        return max(2 * size - 2 - idx, 0)
    return idx


def _mirror_indices(indices, size):
    return np.where(
        indices < 0,
        np.minimum(-indices, size - 1),
        np.where(indices >= size, np.maximum(2 * size - 2 - indices, 0), indices),
    )


def _as_image(pixels):
    image = np.asarray(pixels, dtype=np.float32)
    if image.ndim != 2:
        raise ValueError("image must be a 2D array of shape (height, width)")
    return image


def _as_filter(filt):
    taps = np.asarray(filt, dtype=np.float64)
    if taps.shape != (FILT_LEN,):
        raise ValueError(f"filter must have exactly {FILT_LEN} taps")
    return taps


def _filter_axis(pixels, filt, axis):
    image = _as_image(pixels)
    taps = _as_filter(filt)
    size = image.shape[axis]
    values = image.astype(np.float64)
    total = np.zeros(image.shape, dtype=np.float64)
    if size == 0:
        return total.astype(np.float32)
    positions = np.arange(size)
    for k, tap in enumerate(taps):
        source = _mirror_indices(positions + k - _HALF, size)
        total += np.take(values, source, axis=axis) * tap
    return total.astype(np.float32)


def filter_rows(pixels, filt):
    """Filter each row with a 16-tap filter using mirror extension.

    The output has the input's shape and is stored as float32; the sums
    are accumulated in float64.
    """
    return _filter_axis(pixels, filt, axis=1)


def filter_cols(pixels, filt):
    """Filter each column with a 16-tap filter using mirror extension."""
    return _filter_axis(pixels, filt, axis=0)


@dataclass
class ThreeSubbands:
    """LH, HL and HH subbands of an undecimated wavelet transform."""

    lh: np.ndarray
    hl: np.ndarray
    hh: np.ndarray

    @property
    def width(self):
        """Width of each subband (same as the image width)."""
        return self.lh.shape[1]

    @property
    def height(self):
        """Height of each subband (same as the image height)."""
        return self.lh.shape[0]


def compute_three_subbands(pixels):
    """Decompose an image into its three directional db8 detail subbands.

    - LH: low-pass along rows, high-pass along columns
    - HL: high-pass along rows, low-pass along columns
    - HH: high-pass along rows and columns
    """
    image = _as_image(pixels)
    low = lpdf()

    row_low = filter_rows(image, low)
    lh = filter_cols(row_low, HPDF)
    del row_low

    row_high = filter_rows(image, HPDF)
    hl = filter_cols(row_high, low)
    hh = filter_cols(row_high, HPDF)
    return ThreeSubbands(lh=lh, hl=hl, hh=hh)