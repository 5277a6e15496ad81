from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d.art3d import Line3DCollection, Poly3DCollection

from lorenzfun.core.entity import Trajectory
from lorenzfun.utils.logging import get_logger
from lorenzfun.viewer.state import HELP_LINES, Scene, action_from_key

logger = get_logger(__name__)

BACKGROUND = "black"
AXIS_LIMITS = ((-2.5, 2.5), (-3.0, 3.0), (0.0, 5.0))
FRAME_INTERVAL_MS = 16

# Placeholder geometry for artists with nothing to draw yet.
_EMPTY_SEGMENTS = np.zeros((1, 2, 3))


class _TrajectoryArtists:
    def __init__(self, trail: Line3DCollection, head: Poly3DCollection):
        self.trail = trail
        self.head = head

    def remove(self) -> None:
        self.trail.remove()
        self.head.remove()


class LorenzViewer:
    """Interactive matplotlib 3D view of a :class:`Scene`."""

    def __init__(self, scene: Scene, figure: Optional[Figure] = None, title: str = "lorenz-fun"):
        if figure is None:
            import matplotlib.pyplot as plt

            figure = plt.figure(figsize=(9, 9))
        self.scene = scene
        self.figure = figure
        self.figure.patch.set_facecolor(BACKGROUND)
        self.ax = figure.add_subplot(projection="3d")
        self._style_axes(title)
        self.help_text = figure.text(
            0.01,
            0.99,
            "\n".join(HELP_LINES),
            va="top",
            ha="left",
            color="white",
            family="monospace",
            fontsize=10,
        )
        self._artists: Dict[Trajectory, _TrajectoryArtists] = {}
        self._animation = None
        self._cid = figure.canvas.mpl_connect("key_press_event", self.on_key)
        self._sync_artists()
        self.help_text.set_visible(self.scene.show_help)

    def _style_axes(self, title: str) -> None:
        ax = self.ax
        ax.set_facecolor(BACKGROUND)
        ax.set_xlim(*AXIS_LIMITS[0])
        ax.set_ylim(*AXIS_LIMITS[1])
        ax.set_zlim(*AXIS_LIMITS[2])
        ax.set_axis_off()
        ax.set_title(title, color="white")

    def on_key(self, event: Any) -> bool:
        action = action_from_key(getattr(event, "key", None))
        if action is None:
            return False
        logger.debug("Key %r -> %s", event.key, action.kind.value)
        self.scene.execute(action)
        self._sync_artists()
        return True

    def _add_artists(self, trajectory: Trajectory) -> _TrajectoryArtists:
        trail = Line3DCollection(_EMPTY_SEGMENTS, linewidths=1.0)
        trail.set_visible(False)
        self.ax.add_collection3d(trail)
        head = Poly3DCollection(trajectory.head.faces(), facecolors=[trajectory.color], edgecolors="none")
        self.ax.add_collection3d(head)
        return _TrajectoryArtists(trail, head)

    def _sync_artists(self) -> None:
        live = set(self.scene.trajectories)
        for key in [k for k in self._artists if k not in live]:
            self._artists.pop(key).remove()
        for trajectory in self.scene.trajectories:
            if trajectory not in self._artists:
                self._artists[trajectory] = self._add_artists(trajectory)

    def _draw_trajectory(self, trajectory: Trajectory, artists: _TrajectoryArtists) -> None:
        segments = trajectory.segments()
        if len(segments):
            artists.trail.set_segments(segments)
            artists.trail.set_color(np.clip(trajectory.segment_colors(), 0.0, 1.0))
            artists.trail.set_visible(True)
        else:
            artists.trail.set_segments(_EMPTY_SEGMENTS)
            artists.trail.set_visible(False)
        artists.head.set_verts(trajectory.head.faces())

    def frame(self, _index: int = 0) -> List[Any]:
        """Advance the scene one tick and refresh every artist."""
        self.scene.tick()
        self._sync_artists()
        for trajectory in self.scene.trajectories:
            self._draw_trajectory(trajectory, self._artists[trajectory])
        self.help_text.set_visible(self.scene.show_help)
        drawn: List[Any] = [self.help_text]
        for artists in self._artists.values():
            drawn.extend((artists.trail, artists.head))
        return drawn

    def run(self, interval: int = FRAME_INTERVAL_MS) -> None:
        import matplotlib.pyplot as plt
        from matplotlib.animation import FuncAnimation

        # "h" toggles help here, not the default home-view binding
        plt.rcParams["keymap.home"] = [k for k in plt.rcParams["keymap.home"] if k != "h"]

        logger.info("Starting viewer with %d trajectories", len(self.scene))
        self._animation = FuncAnimation(
            self.figure, self.frame, interval=interval, blit=False, cache_frame_data=False
        )
        plt.show()
