import numpy as np
import pytest

from phasm.cost import WET_COST
from phasm.selection import (
    MAX_ARMOR_ZIGZAG,
    STABLE_COST,
    compute_stability_map,
)


def make_grid(blocks_wide, blocks_tall):
    return np.zeros((blocks_tall, blocks_wide, 8, 8), dtype=np.int16)


QT = [8] * 64

# Natural (row, col) positions of zigzag indices 1..15.
EXPECTED_STABLE = {
    (0, 1), (1, 0), (2, 0), (1, 1), (0, 2),
    (0, 3), (1, 2), (2, 1), (3, 0), (4, 0),
    (3, 1), (2, 2), (1, 3), (0, 4), (0, 5),
}


def test_stability_map_dc_is_wet_lowfreq_ac_is_stable():
    grid = make_grid(2, 2)
    grid[0, 0, 0, 0] = 100
    cost_map = compute_stability_map(grid, QT)
    for br in range(2):
        for bc in range(2):
            assert cost_map.get(br, bc, 0, 0) == WET_COST
            assert cost_map.get(br, bc, 0, 1) == STABLE_COST
            assert cost_map.get(br, bc, 1, 0) == STABLE_COST


def test_stability_map_excludes_high_freq():
    grid = make_grid(1, 1)
    grid[0, 0, 1, 0] = 50
    grid[0, 0, 0, 1] = 1
    cost_map = compute_stability_map(grid, QT)
    assert cost_map.get(0, 0, 1, 0) == STABLE_COST
    assert cost_map.get(0, 0, 0, 1) == STABLE_COST
    assert cost_map.get(0, 0, 3, 1) == STABLE_COST
    assert cost_map.get(0, 0, 2, 2) == STABLE_COST
    assert cost_map.get(0, 0, 7, 7) == WET_COST
    assert cost_map.get(0, 0, 0, 0) == WET_COST


def test_stable_positions_are_first_fifteen_zigzag():
    cost_map = compute_stability_map(make_grid(1, 1), QT)
    stable = {
        (i, j)
        for i in range(8)
        for j in range(8)
        if cost_map.get(0, 0, i, j) == STABLE_COST
    }
    assert stable == EXPECTED_STABLE


def test_zigzag_sixteen_and_beyond_are_wet():
    cost_map = compute_stability_map(make_grid(1, 1), QT)
    assert cost_map.get(0, 0, 1, 4) == WET_COST
    assert cost_map.get(0, 0, 5, 0) == WET_COST
    assert cost_map.get(0, 0, 0, 6) == WET_COST


def test_each_block_has_max_zigzag_stable_positions():
    cost_map = compute_stability_map(make_grid(3, 2), QT)
    stable = np.isfinite(cost_map.costs).reshape(2, 3, 64).sum(axis=2)
    assert (stable == MAX_ARMOR_ZIGZAG).all()


def test_selection_ignores_coefficient_values():
    grid_a = make_grid(2, 1)
    grid_b = make_grid(2, 1)
    grid_b[:] = 37
    map_a = compute_stability_map(grid_a, QT)
    map_b = compute_stability_map(grid_b, [1] * 64)
    assert np.array_equal(map_a.costs, map_b.costs)


def test_bad_grid_shape_rejected():
    with pytest.raises(ValueError):
        compute_stability_map(np.zeros((4, 4)), QT)