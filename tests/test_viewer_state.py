import threading

import pytest

from lorenzfun.core import constants
from lorenzfun.io.scene import SceneConfig
from lorenzfun.core.entity import TrajectoryConfig
from lorenzfun.viewer.state import (
    ActionKind,
    AppAction,
    ConfigInbox,
    LorenzPreset,
    Scene,
    action_from_key,
    preset_configs,
)


@pytest.mark.parametrize(
    "key,kind,preset",
    [
        ("1", ActionKind.INIT_CONFIG, LorenzPreset.ONE),
        ("2", ActionKind.INIT_CONFIG, LorenzPreset.TWO),
        ("h", ActionKind.TOGGLE_HELP, None),
        ("=", ActionKind.ADD_OBJECT, None),
        ("-", ActionKind.REMOVE_OBJECT, None),
    ],
)
def test_key_bindings(key, kind, preset):
    action = action_from_key(key)
    assert action == AppAction(kind, preset)


@pytest.mark.parametrize("key", ["3", "q", "H", "", None])
def test_unbound_keys(key):
    assert action_from_key(key) is None


@pytest.mark.parametrize(
    "selector,expected",
    [(1, LorenzPreset.ONE), ("2", LorenzPreset.TWO), ("two", LorenzPreset.TWO), (3, None), ("x", None)],
)
def test_preset_selector(selector, expected):
    assert LorenzPreset.from_selector(selector) is expected


def test_preset_two_differs_only_by_tiny_offset():
    first, second = preset_configs(LorenzPreset.TWO)
    assert first.pos == constants.PRESET_START
    assert second.pos[0] - first.pos[0] == pytest.approx(constants.CHAOS_OFFSET)
    assert second.pos[1:] == first.pos[1:]
    assert first.color == (1.0, 0.0, 0.0)
    assert second.color == (1.0, 0.0, 1.0)


def test_init_config_replaces_trajectories():
    scene = Scene(seed=1)
    scene.init_config(LorenzPreset.TWO)
    assert len(scene) == 2
    scene.init_config(LorenzPreset.ONE)
    assert len(scene) == 1
    assert scene.trajectories[0].color == (1.0, 1.0, 1.0)


def test_add_and_remove_random():
    scene = Scene(seed=42)
    added = scene.add_random()
    assert len(scene) == 1
    assert all(-10.0 <= v < 10.0 for v in added.config.pos)
    assert all(0.0 <= c < 1.0 for c in added.color)

    assert scene.remove_last() is added
    assert scene.remove_last() is None
    assert len(scene) == 0


def test_random_trajectories_are_seeded():
    a = Scene(seed=3)
    b = Scene(seed=3)
    assert a.add_random().config == b.add_random().config


def test_execute_actions():
    scene = Scene(seed=0)
    scene.execute(action_from_key("2"))
    scene.execute(action_from_key("="))
    assert len(scene) == 3
    scene.execute(action_from_key("-"))
    assert len(scene) == 2
    assert scene.show_help
    scene.execute(action_from_key("h"))
    assert not scene.show_help


def test_tick_steps_every_trajectory():
    scene = Scene(dt=0.01, trail_length=5)
    scene.init_config(LorenzPreset.TWO)
    for _ in range(8):
        scene.tick()
    for traj in scene.trajectories:
        assert len(traj.trail) == 5
    assert scene.trajectories[0].lorenz.state != scene.trajectories[1].lorenz.state


def test_inbox_is_last_write_wins():
    inbox = ConfigInbox()
    assert inbox.take() is None
    assert inbox.request_config(1)
    assert inbox.request_config(2)
    assert not inbox.request_config(7)
    assert inbox.take() is LorenzPreset.TWO
    assert inbox.take() is None


def test_inbox_drained_on_tick():
    scene = Scene()
    scene.init_config(LorenzPreset.ONE)
    scene.inbox.request_config(2)
    scene.tick()
    assert len(scene) == 2
    assert all(len(t.trail) == 1 for t in scene.trajectories)
    scene.tick()
    assert len(scene) == 2


def test_inbox_from_another_thread():
    scene = Scene()
    worker = threading.Thread(target=scene.inbox.request_config, args=("two",))
    worker.start()
    worker.join()
    scene.tick()
    assert len(scene) == 2


def test_from_config_applies_preset_then_extras():
    cfg = SceneConfig(
        dt=0.02,
        trail_length=10,
        show_help=False,
        seed=5,
        preset="one",
        trajectories=[TrajectoryConfig(pos=(1.0, 2.0, 3.0), has_trail=False)],
    )
    scene = Scene.from_config(cfg)
    assert scene.dt == 0.02
    assert not scene.show_help
    assert len(scene) == 2
    assert scene.trajectories[0].trail.max_len == 10
    assert scene.trajectories[1].trail is None
