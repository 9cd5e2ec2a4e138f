"""
Matplotlib shell around AppState.

MatplotlibScene mirrors scene registration onto mplot3d artists; HopfViewer
lays out the two views (projected fibers, base sphere), wires the control
widgets to AppState operations and drives ``tick()`` from a FuncAnimation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Button, CheckButtons, Slider

from hopfviz.core.config import AppConfig, MAX_FIBER_RESOLUTION, MIN_FIBER_RESOLUTION
from hopfviz.core.curve import BasePointCloud, FiberCurve
from hopfviz.core.enums import SceneRole
from hopfviz.core.exceptions import HopfVizError
from hopfviz.core.logging import logger
from hopfviz.core.scene import Scene
from hopfviz.core.state import AppState

__all__ = ["MatplotlibScene", "HopfViewer", "render_snapshot"]

BALL_AXIS_LIMIT = 1.1
BASE_SPHERE_ALPHA = 0.25


class MatplotlibScene(Scene):
    """Scene whose children are mirrored as artists on a 3D axes."""

    def __init__(self, ax, role: SceneRole = SceneRole.MAIN, line_width: float = 1.0, point_size: float = 25.0):
        super().__init__(role)
        self.ax = ax
        self.line_width = line_width
        self.point_size = point_size
        self._artists: Dict[int, Any] = {}

    def _on_add(self, obj: Any) -> None:
        if isinstance(obj, FiberCurve):
            pts = obj.points
            (artist,) = self.ax.plot(
                pts[:, 0], pts[:, 1], pts[:, 2],
                color=tuple(obj.vertex_colors[0]),
                linewidth=self.line_width,
            )
        elif isinstance(obj, BasePointCloud):
            pts = obj.points
            artist = self.ax.scatter(
                pts[:, 0], pts[:, 1], pts[:, 2],
                c=obj.colors, s=self.point_size, depthshade=False,
            )
        else:
            raise TypeError(f"Don't know how to draw {type(obj).__name__}")
        self._artists[id(obj)] = artist

    def _on_remove(self, obj: Any) -> None:
        artist = self._artists.pop(id(obj), None)
        if artist is not None:
            artist.remove()

    def refresh(self) -> None:
        """Push in-place point changes (rotated base points) to their artists."""
        for obj in self:
            if isinstance(obj, BasePointCloud):
                pts = obj.points
                self._artists[id(obj)]._offsets3d = (pts[:, 0], pts[:, 1], pts[:, 2])

    def artist_for(self, obj: Any):
        return self._artists.get(id(obj))


def _style_axes(ax, limit: float, background: str) -> None:
    ax.set_facecolor(background)
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_zlim(-limit, limit)
    ax.set_box_aspect((1, 1, 1))
    ax.set_axis_off()


class HopfViewer:
    """Interactive Hopf fibration viewer.

    With ``controls=False`` no widgets are created, which is what offscreen
    snapshots use.
    """

    def __init__(self, config: Optional[AppConfig] = None, controls: bool = True):
        self.config = config if config is not None else AppConfig()
        view = self.config.view

        self.fig = plt.figure(figsize=view.figure_size, facecolor=view.background)
        self.ax_main = self.fig.add_axes([0.0, 0.0, 0.72, 1.0], projection="3d")
        self.ax_base = self.fig.add_axes([0.70, 0.02, 0.28, 0.40], projection="3d")
        self.ax_main.view_init(elev=view.camera_elevation, azim=view.camera_azimuth)
        _style_axes(self.ax_base, 1.2, view.background)
        self._draw_base_sphere()

        self.scene = MatplotlibScene(self.ax_main, SceneRole.MAIN, view.line_width, view.point_size)
        self.base_scene = MatplotlibScene(self.ax_base, SceneRole.BASE_SPACE, view.line_width, view.point_size)
        self.state = AppState(self.config, scene=self.scene, base_scene=self.base_scene)
        self._update_main_limits()

        self.widgets: Dict[str, Any] = {}
        self._syncing = False
        if controls:
            self._build_controls()
        self.animation: Optional[FuncAnimation] = None

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def _draw_base_sphere(self) -> None:
        u, v = np.mgrid[0:2 * np.pi:32j, 0:np.pi:32j]
        self.ax_base.plot_surface(
            np.cos(u) * np.sin(v), np.sin(u) * np.sin(v), np.cos(v),
            color="white", alpha=BASE_SPHERE_ALPHA, linewidth=0,
        )

    def _update_main_limits(self) -> None:
        limit = BALL_AXIS_LIMIT if self.state.settings.compress_to_ball else self.config.view.axis_limit
        _style_axes(self.ax_main, limit, self.config.view.background)

    def step(self, _frame: int = 0):
        self.state.tick()
        self.base_scene.refresh()
        return []

    def run(self) -> None:
        self.animation = FuncAnimation(
            self.fig, self.step, interval=self.config.view.interval_ms, cache_frame_data=False
        )
        plt.show()

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def _build_controls(self) -> None:
        circle = self.config.circle
        fibers = self.state.settings
        left, width, height = 0.74, 0.18, 0.025

        def slot(row: int):
            return self.fig.add_axes([left, 0.95 - row * 0.04, width, height])

        w = self.widgets
        w["resolution"] = Slider(slot(0), "Fiber resolution", MIN_FIBER_RESOLUTION, MAX_FIBER_RESOLUTION,
                                 valinit=fibers.fiber_resolution, valstep=10)
        w["ball"] = CheckButtons(self.fig.add_axes([left, 0.95 - 1 * 0.04, width, height]),
                                 ["Map R3 to B3"], [fibers.compress_to_ball])
        w["detach"] = Button(slot(2), "Detach")
        w["clear"] = Button(slot(3), "Clear all")
        w["offset"] = Slider(slot(4), "Center offset", -1.0, 0.999, valinit=circle.distance_to_center)
        w["circumference"] = Slider(slot(5), "Circumference", 0.0, 2 * np.pi, valinit=circle.circumference)
        w["count"] = Slider(slot(6), "Point count", 1, 250, valinit=circle.point_count, valstep=1)
        w["x"] = Slider(slot(7), "X-component", 0.0, 1.0, valinit=circle.rotation_axis[0], valstep=0.1)
        w["y"] = Slider(slot(8), "Y-component", 0.0, 1.0, valinit=circle.rotation_axis[1], valstep=0.1)
        w["z"] = Slider(slot(9), "Z-component", 0.0, 1.0, valinit=circle.rotation_axis[2], valstep=0.1)
        w["angle"] = Slider(slot(10), "Angle", 0.0, 0.1, valinit=circle.rotation_angle)

        w["resolution"].on_changed(self._guarded(lambda val: self.state.set_fiber_resolution(int(val))))
        w["ball"].on_clicked(self._guarded(self._toggle_ball))
        w["detach"].on_clicked(self._guarded(lambda _event: self._spawn(self.state.detach)))
        w["clear"].on_clicked(self._guarded(lambda _event: self._spawn(self.state.clear_all)))
        w["offset"].on_changed(self._guarded(self.state.set_center_offset))
        w["circumference"].on_changed(self._guarded(self.state.set_circumference))
        w["count"].on_changed(self._guarded(lambda val: self.state.set_point_count(int(val))))
        for index, key in enumerate(("x", "y", "z")):
            w[key].on_changed(self._guarded(
                lambda val, index=index: self.state.set_rotation_axis_component(index, val)
            ))
        w["angle"].on_changed(self._guarded(self.state.set_rotation_angle))

    def _guarded(self, callback):
        def handler(value):
            if self._syncing:
                return
            try:
                callback(value)
            except HopfVizError as exc:
                logger.error(f"Rejected change: {exc}")
            self.fig.canvas.draw_idle()
        return handler

    def _toggle_ball(self, _label) -> None:
        self.state.set_compress_to_ball(not self.state.settings.compress_to_ball)
        self._update_main_limits()

    def _spawn(self, action) -> None:
        action()
        # Parametrization controls follow the new circle, which starts at the defaults.
        self._syncing = True
        try:
            for key in ("offset", "circumference", "count", "x", "y", "z", "angle"):
                self.widgets[key].reset()
        finally:
            self._syncing = False


def render_snapshot(config: AppConfig, output: Path, frames: int = 0, dpi: int = 120) -> Path:
    """Advance `frames` ticks without any controls and save the figure."""
    viewer = HopfViewer(config, controls=False)
    for frame in range(frames):
        viewer.step(frame)
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    viewer.fig.savefig(output, dpi=dpi, facecolor=viewer.fig.get_facecolor())
    plt.close(viewer.fig)
    logger.info(f"Snapshot written: {output}")
    return output
