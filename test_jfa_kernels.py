"""
Tests for the Taichi propagation backend (skipped when taichi is missing).
"""

import numpy as np
import pytest

ti = pytest.importorskip("taichi")

from grid import NearestPoint
from jfa import JFA
import jfa_kernels
from jfa_kernels import compute_nearest_points, get_kernels
from run import build_demo_grid, demo_predicate


def patterned_values(width, height):
    return [(x * 5 + y * 9) % 13 for y in range(height) for x in range(width)]


def test_kernel_single_seed_records():
    mask = np.zeros((4, 6), dtype=bool)
    mask[1, 2] = True

    records, passes = compute_nearest_points(mask, False, [3, 2, 1, 0])
    assert passes == 4
    assert len(records) == 24
    for i, record in enumerate(records):
        if i == 1 * 6 + 2:
            continue
        assert record == NearestPoint(2, 1)


def test_kernel_uniform_mask_has_no_records():
    mask = np.ones((3, 3), dtype=bool)
    records, passes = compute_nearest_points(mask, True, [2, 1, 0])
    assert records == [None] * 9
    assert passes == 3


def test_taichi_matches_python_on_demo():
    values = build_demo_grid(32, 32)
    inside = demo_predicate(-1)

    py = JFA(32, 32, values, sentinel=-1, backend="python")
    tc = JFA(32, 32, values, sentinel=-1, backend="taichi")

    assert tc.execute(inside) == py.execute(inside)
    assert tc.nearest_points() == py.nearest_points()
    assert tc.stats["num_levels"] == py.stats["num_levels"] == 6


@pytest.mark.parametrize("width,height,sentinel", [(17, 9, 0), (8, 8, 12), (1, 5, 0)])
def test_taichi_matches_python_on_pattern(width, height, sentinel):
    values = patterned_values(width, height)

    def inside(v):
        return v > 9

    py = JFA(width, height, values, sentinel=sentinel, backend="python")
    tc = JFA(width, height, values, sentinel=sentinel, backend="taichi")

    assert tc.execute(inside) == py.execute(inside)
    assert tc.nearest_points() == py.nearest_points()


def test_kernels_reused_across_runs():
    values = patterned_values(12, 7)

    def inside(v):
        return v > 9

    first = JFA(12, 7, values, backend="taichi")
    first_result = first.execute(inside)
    kernels = get_kernels(12, 7)
    cached = len(jfa_kernels._kernels_cache)

    second = JFA(12, 7, values, backend="taichi")
    assert second.execute(inside) == first_result
    assert second.execute(inside) == first_result

    assert get_kernels(12, 7) is kernels
    assert len(jfa_kernels._kernels_cache) == cached
    assert second.nearest_points() == first.nearest_points()


def test_truthy_predicate_matches_python():
    values = [3, 5, 0, 0, 0, 0]

    def truthy(v):
        return v

    py = JFA(3, 2, values, backend="python")
    tc = JFA(3, 2, values, backend="taichi")

    assert tc.execute(truthy) == py.execute(truthy)
    assert tc.nearest_points() == py.nearest_points()
    assert np.array_equal(tc.distance_field(), py.distance_field())
