"""Ghost mode capacity estimation."""

from __future__ import annotations

import numpy as np

from phasm.uniward import compute_uniward

MIN_CAPACITY_RATIO = 5.0
"""Minimum ratio of usable AC coefficients to embedded bits."""

FRAME_OVERHEAD = 50
"""Bytes of framing around the plaintext: length, salt, nonce, tag and CRC."""

MAX_PLAINTEXT_LEN = 0xFFFF
"""Largest plaintext length the 2-byte length prefix can express."""


def estimate_capacity(grid, qt):
    """Estimate the largest plaintext (in bytes) that fits in a luminance grid.

    Counts the AC coefficients with finite J-UNIWARD cost, divides by
    :data:`MIN_CAPACITY_RATIO`, converts to bytes and subtracts the frame
    overhead. Returns 0 when the image is too small.
    """
    cost_map = compute_uniward(grid, qt)
    ac_costs = cost_map.costs.reshape(cost_map.blocks_tall, cost_map.blocks_wide, 64)[:, :, 1:]
    usable = int(np.isfinite(ac_costs).sum())

    max_frame_bytes = int(usable / MIN_CAPACITY_RATIO) // 8
    if max_frame_bytes <= FRAME_OVERHEAD:
        return 0
    return min(max_frame_bytes - FRAME_OVERHEAD, MAX_PLAINTEXT_LEN)