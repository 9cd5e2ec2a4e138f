"""Tests for hopfviz.core.fibration: fiber generation, projection, ball compression."""

import numpy as np
import pytest

from hopfviz.core.exceptions import DegenerateBasePointError, ParameterRangeError
from hopfviz.core.fibration import (
    POLE_CLAMP,
    compress_r3_to_ball,
    hopf_fiber,
    hopf_map,
    project_fiber,
    stereographic_projection,
)


def _unit_vectors(count, seed=7):
    rng = np.random.default_rng(seed)
    v = rng.normal(size=(count, 3))
    return v / np.linalg.norm(v, axis=1, keepdims=True)


BASE_POINTS = [
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, -1.0, 0.0),
    *map(tuple, _unit_vectors(5)),
]


@pytest.mark.parametrize("base_point", BASE_POINTS)
@pytest.mark.parametrize("resolution", [1, 3, 128])
def test_fiber_points_are_unit_quaternions(base_point, resolution):
    fiber = hopf_fiber(base_point, resolution)
    assert fiber.shape == (resolution, 4)
    assert np.allclose(np.linalg.norm(fiber, axis=1), 1.0, atol=1e-6)


@pytest.mark.parametrize("base_point", BASE_POINTS)
def test_fiber_is_evenly_spaced(base_point):
    n = 64
    fiber = hopf_fiber(base_point, n)
    dots = np.sum(fiber * np.roll(fiber, -1, axis=0), axis=1)
    assert np.allclose(dots, np.cos(2 * np.pi / n), atol=1e-9)


@pytest.mark.parametrize("base_point", BASE_POINTS)
def test_fiber_maps_back_to_its_base_point(base_point):
    fiber = hopf_fiber(base_point, 32)
    assert np.allclose(hopf_map(fiber), np.asarray(base_point), atol=1e-9)


def test_antipode_uses_limiting_fiber():
    """bx = -1 must not produce NaN; the fiber still lies over (-1, 0, 0)."""
    fiber = hopf_fiber((-1.0, 0.0, 0.0), 16)
    assert np.all(np.isfinite(fiber))
    assert np.allclose(np.linalg.norm(fiber, axis=1), 1.0)
    assert np.allclose(hopf_map(fiber), (-1.0, 0.0, 0.0), atol=1e-12)


def test_near_antipode_is_finite():
    b = np.array([-1.0, 1e-5, 0.0])
    b /= np.linalg.norm(b)
    fiber = hopf_fiber(b, 16)
    assert np.all(np.isfinite(fiber))
    assert np.allclose(np.linalg.norm(fiber, axis=1), 1.0, atol=1e-6)


@pytest.mark.parametrize("bad", [(2.0, 0.0, 0.0), (np.nan, 0.0, 1.0), (1.0, 0.0)])
def test_invalid_base_points_are_rejected(bad):
    with pytest.raises(DegenerateBasePointError):
        hopf_fiber(bad, 8)


@pytest.mark.parametrize("resolution", [0, -3, 2.5])
def test_invalid_resolution_is_rejected(resolution):
    with pytest.raises(ParameterRangeError):
        hopf_fiber((0.0, 0.0, 1.0), resolution)


def test_stereographic_projection_values_and_closing():
    fiber = np.array([
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [-1.0, 0.0, 0.0, 0.0],
    ])
    projected = stereographic_projection(fiber)
    assert projected.shape == (4, 3)
    assert np.allclose(projected[0], (1.0, 0.0, 0.0))
    assert np.allclose(projected[1], (0.0, 1.0, 0.0))
    assert np.allclose(projected[2], (0.0, 0.0, 0.0))
    assert np.array_equal(projected[-1], projected[0])

    # Ball mode leaves closing to the compressor
    assert stereographic_projection(fiber, compress_to_ball=True).shape == (3, 3)


def test_stereographic_projection_clamps_pole():
    eps = 1e-6
    fiber = np.array([[np.cos(eps), np.sin(eps), 0.0, 0.0], [1.0, 0.0, 0.0, 0.0]])
    projected = stereographic_projection(fiber, compress_to_ball=True)
    assert np.all(np.isfinite(projected))
    assert projected[0, 0] == pytest.approx(np.sin(eps) / POLE_CLAMP)
    assert np.allclose(projected[1], 0.0)


def test_compress_maps_into_open_unit_ball():
    rng = np.random.default_rng(3)
    points = rng.normal(size=(200, 3)) * rng.uniform(0.0, 1000.0, size=(200, 1))
    compressed = compress_r3_to_ball(points)
    assert compressed.shape == (201, 3)
    assert np.all(np.linalg.norm(compressed, axis=1) < 1.0)
    assert np.array_equal(compressed[-1], compressed[0])


def test_compress_is_monotone_along_a_ray():
    direction = np.array([1.0, 2.0, -2.0]) / 3.0
    radii = np.linspace(0.1, 50.0, 40)
    compressed = compress_r3_to_ball(radii[:, None] * direction)[:-1]
    norms = np.linalg.norm(compressed, axis=1)
    assert np.all(np.diff(norms) > 0)
    assert np.allclose(compressed / norms[:, None], direction)
    assert norms == pytest.approx(radii / np.sqrt(1 + radii ** 2))


def test_compress_keeps_origin():
    compressed = compress_r3_to_ball(np.zeros((2, 3)))
    assert np.all(np.isfinite(compressed))
    assert np.allclose(compressed, 0.0)


def test_compress_disabled_is_passthrough():
    points = np.array([[3.0, 0.0, 0.0], [0.0, 4.0, 0.0]])
    assert np.array_equal(compress_r3_to_ball(points, compress_to_ball=False), points)


@pytest.mark.parametrize("compress", [False, True])
@pytest.mark.parametrize("resolution", [10, 128, 500])
def test_pipeline_closes_loop_exactly_once(compress, resolution):
    points = project_fiber(hopf_fiber((0.0, 0.6, 0.8), resolution), compress)
    assert points.shape == (resolution + 1, 3)
    assert np.array_equal(points[-1], points[0])
    assert not np.array_equal(points[-2], points[0])
