"""Tests for hopfviz.core.state.AppState: global settings and the circle collection."""

import numpy as np
import pytest

from hopfviz.core.config import AppConfig, CircleParameters, FiberSettings
from hopfviz.core.enums import CircleState
from hopfviz.core.exceptions import ParameterRangeError
from hopfviz.core.state import AppState


def _small_config(**fiber_overrides):
    """Config with few points so every test builds quickly."""
    fibers = {"fiber_resolution": 128, **fiber_overrides}
    return AppConfig(fibers=FiberSettings(**fibers), circle=CircleParameters(point_count=4))


def _all_vertex_counts(state):
    return {curve.geometry.vertex_count for curve in state.scene}


def test_default_state_has_one_rendered_circle():
    state = AppState(_small_config())
    assert len(state.circles) == 1
    assert state.active_circle.state is CircleState.RENDERED
    assert len(state.scene) == 4
    assert len(state.base_scene) == 1


def test_resolution_change_rebuilds_every_circle():
    state = AppState(_small_config())
    state.detach()
    state.set_fiber_resolution(256)
    assert len(state.scene) == 8
    assert _all_vertex_counts(state) == {257}
    assert all(len(circle.curves) == 4 for circle in state.circles)


@pytest.mark.parametrize("resolution", [5, 501, 1000])
def test_out_of_range_resolution_is_rejected_without_rebuild(resolution):
    state = AppState(_small_config())
    curves = list(state.scene)
    with pytest.raises(ParameterRangeError):
        state.set_fiber_resolution(resolution)
    assert state.settings.fiber_resolution == 128
    assert list(state.scene) == curves


def test_ball_mode_rebuilds_into_unit_ball():
    state = AppState(_small_config(fiber_resolution=64))
    state.set_compress_to_ball(True)
    assert _all_vertex_counts(state) == {65}
    for curve in state.scene:
        assert np.all(np.linalg.norm(curve.points, axis=1) < 1.0)


def test_runtime_changes_do_not_touch_loaded_config():
    config = _small_config()
    state = AppState(config)
    state.set_fiber_resolution(300)
    assert config.fibers.fiber_resolution == 128


def test_detach_and_clear_all():
    state = AppState(_small_config())
    first = state.active_circle
    second = state.detach()
    third = state.detach()
    assert state.circles == [first, second, third]
    assert state.active_circle is third
    assert len(state.scene) == 12

    fresh = state.clear_all()
    assert state.circles == [fresh]
    assert all(c.state is CircleState.DESTROYED for c in (first, second, third))
    assert len(state.scene) == 4
    assert len(state.base_scene) == 1


def test_reparametrization_replaces_only_the_active_circle():
    state = AppState(_small_config())
    kept = state.active_circle
    state.detach()
    state.set_rotation_axis_component(0, 1.0)
    state.set_rotation_angle(0.05)
    state.set_point_count(6)
    old = state.active_circle

    new = state.set_center_offset(0.5)

    assert old.state is CircleState.DESTROYED
    assert state.circles == [kept, new]
    assert new.distance_to_center == 0.5
    assert new.point_count == 6
    assert np.allclose(new.rotation_axis, (1.0, 0.0, 0.0))
    assert new.rotation_angle == 0.05
    assert new.default_rotation is old.default_rotation
    assert len(state.scene) == 4 + 6
    assert state.scene.owned_by(old) == []


def test_reparametrization_validates_before_destroying():
    state = AppState(_small_config())
    active = state.active_circle
    with pytest.raises(ParameterRangeError):
        state.set_center_offset(1.5)
    with pytest.raises(ParameterRangeError):
        state.set_point_count(0)
    assert state.active_circle is active
    assert active.state is CircleState.RENDERED


def test_tick_rebuilds_only_rotating_circles():
    state = AppState(_small_config(fiber_resolution=32))
    state.set_rotation_axis_component(1, 1.0)
    state.set_rotation_angle(0.1)
    still = state.detach()
    before = still.points.copy()
    assert state.tick() == 1
    assert np.array_equal(still.points, before)
    assert not np.allclose(state.circles[0].points, state.circles[0].default_rotation.apply(
        np.array([state.circles[0].point_coordinate(i) for i in range(4)])
    ))


def test_axis_component_index_is_checked():
    state = AppState(_small_config())
    with pytest.raises(ParameterRangeError):
        state.set_rotation_axis_component(3, 1.0)


def test_operations_without_circles_are_rejected():
    state = AppState(_small_config(), create_default=False)
    assert state.active_circle is None
    with pytest.raises(ParameterRangeError):
        state.set_rotation_angle(0.1)
    assert state.tick() == 0
