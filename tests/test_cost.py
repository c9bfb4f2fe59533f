import math

import numpy as np
import pytest

from phasm.cost import WET_COST, CostMap


def test_new_map_is_all_wet():
    cost_map = CostMap(3, 2)
    for br in range(2):
        for bc in range(3):
            for i in range(8):
                for j in range(8):
                    assert cost_map.get(br, bc, i, j) == WET_COST


def test_unset_position_is_positive_infinity():
    cost_map = CostMap(1, 1)
    value = cost_map.get(0, 0, 0, 0)
    assert math.isinf(value)
    assert value > 0


def test_set_get_roundtrip():
    cost_map = CostMap(2, 2)
    cost_map.set(1, 0, 3, 4, 0.5)
    assert cost_map.get(1, 0, 3, 4) == 0.5


def test_set_touches_only_one_position():
    cost_map = CostMap(2, 2)
    cost_map.set(0, 1, 2, 2, 2.0)
    finite = np.isfinite(cost_map.costs)
    assert finite.sum() == 1
    assert finite[0, 1, 2, 2]


def test_values_are_stored_as_float32():
    cost_map = CostMap(1, 1)
    cost_map.set(0, 0, 1, 1, 0.1)
    assert cost_map.get(0, 0, 1, 1) == float(np.float32(0.1))


def test_total_blocks_and_shape():
    cost_map = CostMap(5, 3)
    assert cost_map.total_blocks() == 5 * 3
    assert cost_map.costs.shape == (3, 5, 8, 8)
    assert cost_map.blocks_wide == 5
    assert cost_map.blocks_tall == 3


def test_out_of_range_position_raises():
    cost_map = CostMap(2, 1)
    with pytest.raises(IndexError):
        cost_map.get(1, 0, 0, 0)
    with pytest.raises(IndexError):
        cost_map.set(0, 0, 8, 0, 1.0)


def test_negative_dimensions_rejected():
    with pytest.raises(ValueError):
        CostMap(-1, 2)