"""UERD (Uniform Embedding Revisited Distortion) cost function."""

from __future__ import annotations

import numpy as np

from phasm.cost import CostMap

EPSILON = 1e-10


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


def compute_uerd(grid, qt):
    """Compute UERD embedding costs for one component's DCT grid.

    ``grid`` is an integer array of shape ``(blocks_tall, blocks_wide, 8, 8)``
    and ``qt`` the 64 quantization steps in natural (row-major) order.
    Textured blocks and higher frequencies get lower costs. DC and
    zero-valued AC coefficients stay at the wet cost.
    """
    coeffs = _as_grid(grid)
    steps = _as_table(qt)
    blocks_tall, blocks_wide = coeffs.shape[:2]
    cost_map = CostMap(blocks_wide, blocks_tall)

    values = coeffs.astype(np.float64)
    flat = values.reshape(blocks_tall, blocks_wide, 64)
    energy = np.square(flat[:, :, 1:]).sum(axis=2)

    freq_factor = (np.add.outer(np.arange(8), np.arange(8)) + 1).astype(np.float64)
    costs = steps / (energy[:, :, None, None] * freq_factor + EPSILON)

    embeddable = coeffs != 0
    embeddable[:, :, 0, 0] = False
    cost_map.costs[embeddable] = costs[embeddable].astype(np.float32)
    return cost_map