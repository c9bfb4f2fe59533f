"""J-UNIWARD (JPEG Universal Wavelet Relative Distortion) cost function.

The cost of changing a DCT coefficient by one step is the wavelet-domain
impact of that change, measured with three directional db8 filters and
weighted inversely by the cover's own wavelet magnitudes. Changes in
textured regions therefore cost less than changes in smooth regions.
"""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from phasm.cost import CostMap
from phasm.wavelet import FILT_LEN, HPDF, compute_three_subbands, lpdf

SIGMA = 0.015625
"""Stabilization constant (2**-6) added to cover wavelet magnitudes."""

IMPACT_SIZE = 8 + FILT_LEN - 1
"""Side of the wavelet-domain window affected by one coefficient change."""

_PAD = FILT_LEN - 1

_SCALE = np.array([1.0 / np.sqrt(2.0)] + [1.0] * 7)
_IDCT = (_SCALE[:, None] / 2.0) * np.cos(
    (2.0 * np.arange(8)[None, :] + 1.0) * np.arange(8)[:, None] * np.pi / 16.0
)


def _as_grid(grid):
    coeffs = np.asarray(grid)
    if coeffs.ndim != 4 or coeffs.shape[2:] != (8, 8):
        raise ValueError("DCT grid must have shape (blocks_tall, blocks_wide, 8, 8)")
    return coeffs


def _as_table(qt):
    table = np.asarray(qt, dtype=np.float64)
    if table.size != 64:
        raise ValueError("quantization table must hold 64 values")
    return table.reshape(8, 8)


def idct_block(quantized, qt):
    """Dequantize and inverse-transform one 8x8 block.

    Returns an 8x8 float64 array of pixel values including the +128
    level shift. No clamping is applied.
    """
    coeffs = np.asarray(quantized, dtype=np.float64)
    if coeffs.size != 64:
        raise ValueError("a DCT block must hold 64 coefficients")
    dequantized = coeffs.reshape(8, 8) * _as_table(qt)
    return _IDCT.T @ dequantized @ _IDCT + 128.0


def decompress_to_pixels(grid, qt):
    """Decompress a whole DCT grid to a float32 image of shape (8*bt, 8*bw)."""
    coeffs = _as_grid(grid)
    steps = _as_table(qt)
    blocks_tall, blocks_wide = coeffs.shape[:2]
    dequantized = coeffs.astype(np.float64) * steps
    pixels = np.einsum("ur,abuv,vc->abrc", _IDCT, dequantized, _IDCT) + 128.0
    image = pixels.transpose(0, 2, 1, 3).reshape(blocks_tall * 8, blocks_wide * 8)
    return image.astype(np.float32)


def precompute_basis_functions(qt):
    """Pixel-domain change caused by +1 on each quantized coefficient.

    Returns an array of shape ``(8, 8, 8, 8)``: ``basis[fi, fj]`` is the
    8x8 block produced by a unit impulse at ``(fi, fj)``, scaled by the
    quantization step of that position.
    """
    steps = _as_table(qt)
    return np.einsum("ir,jc->ijrc", _IDCT, _IDCT) * steps[:, :, None, None]


def _impact_matrix(filt):
    out = np.arange(IMPACT_SIZE)[:, None]
    src = np.arange(8)[None, :]
    taps = src - out + 14
    valid = (taps >= 0) & (taps < FILT_LEN)
    return np.where(valid, np.asarray(filt)[np.clip(taps, 0, FILT_LEN - 1)], 0.0)


def _impact_deltas(basis):
    low = _impact_matrix(lpdf())
    high = _impact_matrix(HPDF)
    lh = np.einsum("xr,fgrc,yc->fgxy", high, basis, low)
    hl = np.einsum("xr,fgrc,yc->fgxy", low, basis, high)
    hh = np.einsum("xr,fgrc,yc->fgxy", high, basis, high)
    return np.abs(np.stack([lh, hl, hh]))


def compute_uniward(grid, qt):
    """Compute J-UNIWARD embedding costs for one component's DCT grid.

    ``grid`` is an integer array of shape ``(blocks_tall, blocks_wide, 8, 8)``
    and ``qt`` the 64 quantization steps in natural order. DC and zero-valued
    AC coefficients keep the wet cost.
    """
    coeffs = _as_grid(grid)
    blocks_tall, blocks_wide = coeffs.shape[:2]
    cost_map = CostMap(blocks_wide, blocks_tall)
    if blocks_tall == 0 or blocks_wide == 0:
        return cost_map

    subbands = compute_three_subbands(decompress_to_pixels(coeffs, qt))
    weights = [
        np.pad(1.0 / (np.abs(band.astype(np.float64)) + SIGMA), ((_PAD, 0), (_PAD, 0)))
        for band in (subbands.lh, subbands.hl, subbands.hh)
    ]
    windows = [
        sliding_window_view(weight, (IMPACT_SIZE, IMPACT_SIZE))[::8, ::8]
        for weight in weights
    ]

    deltas = _impact_deltas(precompute_basis_functions(qt))
    impact = deltas.transpose(0, 3, 4, 1, 2).reshape(3 * IMPACT_SIZE * IMPACT_SIZE, 64)

    costs = np.empty((blocks_tall, blocks_wide, 64), dtype=np.float64)
    for br in range(blocks_tall):
        row = np.concatenate(
            [win[br].reshape(blocks_wide, IMPACT_SIZE * IMPACT_SIZE) for win in windows],
            axis=1,
        )
        costs[br] = row @ impact
    costs = costs.reshape(blocks_tall, blocks_wide, 8, 8)

    embeddable = (coeffs != 0) & (costs > 0.0) & np.isfinite(costs)
    embeddable[:, :, 0, 0] = False
    cost_map.costs[embeddable] = costs[embeddable].astype(np.float32)
    return cost_map