import numpy as np
import pytest

from lorenzfun.core import constants
from lorenzfun.core.entity import Trajectory, TrajectoryConfig


def test_defaults():
    cfg = TrajectoryConfig()
    assert cfg.effective_color == constants.WHITE
    assert cfg.has_trail
    assert cfg.trail_length == constants.TRAIL_LEN


def test_step_maps_state_into_visual_space():
    traj = Trajectory(TrajectoryConfig(pos=(1.0, 1.0, 1.0), color=(1.0, 0.0, 0.0)))
    pos = traj.step(0.01)

    np.testing.assert_allclose(pos, np.array(traj.lorenz.state) * 0.1, rtol=1e-6)
    np.testing.assert_array_equal(traj.position, pos)
    assert len(traj.trail) == 1
    np.testing.assert_array_equal(traj.trail[0], pos)
    assert traj.head.angle() == pytest.approx(constants.HEAD_SPIN)


def test_trail_is_bounded_and_segments_fade():
    traj = Trajectory(TrajectoryConfig(pos=(0.1, 0.1, 0.1), color=(0.0, 1.0, 0.0), trail_length=20))
    for _ in range(50):
        traj.step()

    assert len(traj.trail) == 20
    segments = traj.segments()
    colors = traj.segment_colors()
    assert segments.shape == (19, 2, 3)
    assert colors.shape == (19, 3)
    np.testing.assert_array_equal(segments[0, 0], traj.position)
    np.testing.assert_allclose(colors[0], [0.0, 1.0, 0.0])
    assert np.all(np.diff(colors[:, 1]) < 0)


def test_without_trail():
    traj = Trajectory(TrajectoryConfig(pos=(1.0, 2.0, 3.0), has_trail=False))
    for _ in range(5):
        traj.step()
    assert traj.trail is None
    assert traj.segments().shape == (0, 2, 3)
    assert traj.segment_colors().shape == (0, 3)


def test_entities_do_not_share_state():
    a = Trajectory(TrajectoryConfig(pos=(1.0, 1.0, 1.0)))
    b = Trajectory(TrajectoryConfig(pos=(1.0, 1.0, 1.0)))
    a.step()
    assert a.lorenz.state != b.lorenz.state
    assert len(b.trail) == 0
