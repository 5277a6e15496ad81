from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

import numpy as np

from lorenzfun.core import constants
from lorenzfun.core.entity import Trajectory, TrajectoryConfig
from lorenzfun.io.scene import SceneConfig
from lorenzfun.utils.logging import get_logger

logger = get_logger(__name__)

HELP_LINES = (
    "Press '1' for Lorenz config 1.",
    "Press '2' for Lorenz config 2.",
    "Press '=' to add a random trajectory, '-' to remove one.",
    "Left-click drag to rotate.",
    "Right-click drag to zoom.",
    "Press 'h' to toggle this help text.",
)


class LorenzPreset(Enum):
    ONE = 1
    TWO = 2

    @classmethod
    def from_selector(cls, value: Any) -> Optional["LorenzPreset"]:
        """Map ``1``/``2``/``"one"``/``"two"`` to a preset, anything else to None."""
        key = str(value).strip().lower()
        for preset in cls:
            if key in (str(preset.value), preset.name.lower()):
                return preset
        return None


def preset_configs(preset: LorenzPreset, trail_length: int = constants.TRAIL_LEN) -> List[TrajectoryConfig]:
    x, y, z = constants.PRESET_START
    if preset is LorenzPreset.ONE:
        return [TrajectoryConfig(pos=(x, y, z), color=(1.0, 1.0, 1.0), trail_length=trail_length)]
    return [
        TrajectoryConfig(pos=(x, y, z), color=(1.0, 0.0, 0.0), trail_length=trail_length),
        TrajectoryConfig(
            pos=(x + constants.CHAOS_OFFSET, y, z), color=(1.0, 0.0, 1.0), trail_length=trail_length
        ),
    ]


class ActionKind(Enum):
    INIT_CONFIG = "init_config"
    TOGGLE_HELP = "toggle_help"
    ADD_OBJECT = "add_object"
    REMOVE_OBJECT = "remove_object"


@dataclass(frozen=True)
class AppAction:
    kind: ActionKind
    preset: Optional[LorenzPreset] = None


KEY_ACTIONS = {
    "1": AppAction(ActionKind.INIT_CONFIG, LorenzPreset.ONE),
    "2": AppAction(ActionKind.INIT_CONFIG, LorenzPreset.TWO),
    "h": AppAction(ActionKind.TOGGLE_HELP),
    "=": AppAction(ActionKind.ADD_OBJECT),
    "-": AppAction(ActionKind.REMOVE_OBJECT),
}


def action_from_key(key: Optional[str]) -> Optional[AppAction]:
    if key is None:
        return None
    return KEY_ACTIONS.get(key)


class ConfigInbox:
    """
    Single-slot inbound queue for preset requests coming from outside the frame loop.

    A later request overwrites an earlier one that has not been taken yet.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Optional[LorenzPreset] = None

    def put(self, preset: LorenzPreset) -> None:
        with self._lock:
            self._pending = preset

    def request_config(self, selector: Any) -> bool:
        preset = LorenzPreset.from_selector(selector)
        if preset is None:
            return False
        self.put(preset)
        return True

    def take(self) -> Optional[LorenzPreset]:
        with self._lock:
            preset, self._pending = self._pending, None
        return preset


class Scene:
    """All live trajectories plus the viewer's toggles; stepped once per frame."""

    def __init__(
        self,
        dt: float = constants.DEFAULT_DT,
        trail_length: int = constants.TRAIL_LEN,
        show_help: bool = True,
        seed: Optional[int] = None,
    ):
        self.dt = float(dt)
        self.trail_length = int(trail_length)
        self.show_help = show_help
        self.rng = np.random.default_rng(seed)
        self.inbox = ConfigInbox()
        self.trajectories: List[Trajectory] = []

    @classmethod
    def from_config(cls, config: SceneConfig) -> "Scene":
        scene = cls(
            dt=config.dt,
            trail_length=config.trail_length,
            show_help=config.show_help,
            seed=config.seed,
        )
        if config.preset is not None:
            scene.init_config(LorenzPreset.from_selector(config.preset))
        for traj_cfg in config.trajectories:
            scene.add(traj_cfg)
        return scene

    def __len__(self) -> int:
        return len(self.trajectories)

    def add(self, config: TrajectoryConfig) -> Trajectory:
        trajectory = Trajectory(config)
        self.trajectories.append(trajectory)
        logger.debug("Added trajectory pos=%s color=%s", config.pos, config.effective_color)
        return trajectory

    def clear(self) -> None:
        while self.trajectories:
            self.remove_last()

    def init_config(self, preset: LorenzPreset) -> None:
        logger.info("Initialising Lorenz config %s", preset.name.lower())
        self.clear()
        for config in preset_configs(preset, self.trail_length):
            self.add(config)

    def add_random(self) -> Trajectory:
        pos = constants.RANDOM_POS_OFFSET + self.rng.random(3) * constants.RANDOM_POS_SCALE
        color = self.rng.random(3)
        config = TrajectoryConfig(
            pos=tuple(float(v) for v in pos),
            color=tuple(float(c) for c in color),
            trail_length=self.trail_length,
        )
        return self.add(config)

    def remove_last(self) -> Optional[Trajectory]:
        if not self.trajectories:
            return None
        trajectory = self.trajectories.pop()
        logger.debug("Removed trajectory pos=%s", trajectory.config.pos)
        return trajectory

    def execute(self, action: AppAction) -> None:
        if action.kind is ActionKind.INIT_CONFIG:
            self.init_config(action.preset)
        elif action.kind is ActionKind.TOGGLE_HELP:
            self.show_help = not self.show_help
        elif action.kind is ActionKind.ADD_OBJECT:
            self.add_random()
        elif action.kind is ActionKind.REMOVE_OBJECT:
            self.remove_last()

    def tick(self) -> None:
        pending = self.inbox.take()
        if pending is not None:
            self.init_config(pending)
        for trajectory in self.trajectories:
            trajectory.step(self.dt)
