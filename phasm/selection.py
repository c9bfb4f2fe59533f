"""Frequency-based coefficient selection for Armor embedding."""

from __future__ import annotations

import numpy as np

from phasm.cost import CostMap

MAX_ARMOR_ZIGZAG = 15
"""Highest zigzag index used for Armor embedding."""

STABLE_COST = 1.0
"""Cost given to selected (stable) positions."""


def _natural_to_zigzag():
    table = [0] * 64
    zz = 0
    for s in range(15):
        rows = range(max(0, s - 7), min(s, 7) + 1)
        if s % 2 == 0:
            rows = reversed(rows)
        for i in rows:
            table[i * 8 + (s - i)] = zz
            zz += 1
    return tuple(table)


NATURAL_TO_ZIGZAG = _natural_to_zigzag()
"""Zigzag index of each natural (row-major) position in an 8x8 block."""

_ZIGZAG = np.array(NATURAL_TO_ZIGZAG).reshape(8, 8)
_SELECTED = (_ZIGZAG >= 1) & (_ZIGZAG <= MAX_ARMOR_ZIGZAG)


def compute_stability_map(grid, qt):
    """Build a cost map selecting AC positions with zigzag index 1..15.

    ``grid`` is an array of shape ``(blocks_tall, blocks_wide, 8, 8)``;
    only its shape is used. ``qt`` is accepted for interface symmetry and
    ignored. Selected positions get :data:`STABLE_COST`, all others stay wet.
    """
    shape = np.shape(grid)
    if len(shape) != 4 or tuple(shape[2:]) != (8, 8):
        raise ValueError("DCT grid must have shape (blocks_tall, blocks_wide, 8, 8)")
    blocks_tall, blocks_wide = shape[:2]
    cost_map = CostMap(blocks_wide, blocks_tall)
    cost_map.costs[:, :, _SELECTED] = STABLE_COST
    return cost_map