"""Per-coefficient embedding cost storage shared by the cost functions."""

from __future__ import annotations

import math

import numpy as np

WET_COST = math.inf
"""Cost of a coefficient that must never be modified."""

WET_COST_F64 = math.inf
"""Alias of :data:`WET_COST` for code working in double precision."""


class CostMap:
    """Embedding costs for one image component.

    Costs are stored as float32 in an array of shape
    ``(blocks_tall, blocks_wide, 8, 8)``, in the same block-raster order
    as the DCT grid. Every position starts out at :data:`WET_COST`.
    """

    def __init__(self, blocks_wide, blocks_tall):
        if blocks_wide < 0 or blocks_tall < 0:
            raise ValueError("block counts must not be negative")
        self.blocks_wide = int(blocks_wide)
        self.blocks_tall = int(blocks_tall)
        self.costs = np.full(
            (self.blocks_tall, self.blocks_wide, 8, 8), WET_COST, dtype=np.float32
        )

    def __repr__(self):
        return f"CostMap(blocks_wide={self.blocks_wide}, blocks_tall={self.blocks_tall})"

    def total_blocks(self):
        """Number of 8x8 blocks covered by the map."""
        return self.blocks_wide * self.blocks_tall

    def get(self, br, bc, i, j):
        """Cost at block ``(br, bc)``, frequency position ``(i, j)``."""
        self._check(br, bc, i, j)
        return float(self.costs[br, bc, i, j])

    def set(self, br, bc, i, j, val):
        """Set the cost at block ``(br, bc)``, frequency position ``(i, j)``."""
        self._check(br, bc, i, j)
        self.costs[br, bc, i, j] = np.float32(val)

    def _check(self, br, bc, i, j):
        if not (
            0 <= br < self.blocks_tall
            and 0 <= bc < self.blocks_wide
            and 0 <= i < 8
            and 0 <= j < 8
        ):
            raise IndexError(f"position ({br}, {bc}, {i}, {j}) is outside the cost map")