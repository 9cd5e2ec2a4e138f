"""Tests for hopfviz.core.curve: polyline assembly and resource ownership."""

import numpy as np
import pytest

from hopfviz.core.curve import (
    DEFAULT_MAX_FIBER_RESOLUTION,
    assemble_fiber_curve,
    compute_line_distances,
)
from hopfviz.core.exceptions import ParameterRangeError, ResourceError

RED = (1.0, 0.0, 0.0)


def test_line_distances_are_cumulative_per_segment():
    points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 2.0, 0.0]])
    assert compute_line_distances(points) == pytest.approx(np.array([[0.0, 1.0], [1.0, 3.0]]))


def test_assembled_buffers_have_expected_sizes():
    n = 64
    curve = assemble_fiber_curve((0.0, 0.0, 1.0), RED, n)
    geometry = curve.geometry
    assert geometry.positions.shape == (3 * (n + 1),)
    assert geometry.vertex_count == n + 1
    # Color buffer is sized for the largest resolution, not the current one
    assert geometry.colors.shape == (3 * (DEFAULT_MAX_FIBER_RESOLUTION + 1),)
    assert np.allclose(curve.vertex_colors, RED)
    assert geometry.line_distances.shape == (n, 2)


def test_arc_length_matches_polyline_length():
    curve = assemble_fiber_curve((0.0, 0.6, 0.8), RED, 100)
    d = curve.geometry.line_distances
    assert d[0, 0] == 0.0
    assert np.all(np.diff(d.ravel()) >= 0.0)
    assert np.allclose(d[1:, 0], d[:-1, 1])
    expected = np.sum(np.linalg.norm(np.diff(curve.points, axis=0), axis=1))
    assert curve.arc_length == pytest.approx(expected)


def test_ball_mode_curve_stays_inside_unit_ball():
    curve = assemble_fiber_curve((1.0, 0.0, 0.0), RED, 50, compress_to_ball=True)
    assert curve.points.shape == (51, 3)
    assert np.all(np.linalg.norm(curve.points, axis=1) < 1.0)


def test_resolution_above_buffer_bound_is_rejected():
    with pytest.raises(ParameterRangeError):
        assemble_fiber_curve((0.0, 0.0, 1.0), RED, 300, max_fiber_resolution=256)


def test_each_curve_owns_its_material_and_releases_once():
    a = assemble_fiber_curve((0.0, 0.0, 1.0), RED, 16)
    b = assemble_fiber_curve((0.0, 0.0, 1.0), RED, 16)
    assert a.material is not b.material
    assert a.geometry is not b.geometry

    a.dispose()
    assert a.disposed
    assert not b.disposed
    with pytest.raises(ResourceError):
        a.dispose()
