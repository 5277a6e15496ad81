import math

import numpy as np
import pytest

from lorenzfun.core import constants
from lorenzfun.core.visual import SpinningMarker, axis_angle, quat_rotate, shade, to_visual


def test_to_visual_scales_and_downcasts():
    v = to_visual((10.0, -20.0, 30.0))
    assert v.dtype == np.float32
    np.testing.assert_allclose(v, [1.0, -2.0, 3.0], rtol=1e-6)
    np.testing.assert_allclose(to_visual((1.0, 1.0, 1.0), scale=2.0), [2.0, 2.0, 2.0])


def test_shade():
    np.testing.assert_allclose(shade((1.0, 0.5, 0.2), 0.5), [0.5, 0.25, 0.1])


def test_quaternion_rotates_about_vertical_axis():
    q = axis_angle((0.0, 1.0, 0.0), math.pi / 2)
    rotated = quat_rotate(q, np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(rotated, [0.0, 0.0, -1.0], atol=1e-12)
    batch = quat_rotate(q, np.array([[0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]))
    np.testing.assert_allclose(batch, [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0]], atol=1e-12)


def test_marker_spins_a_fixed_angle_per_tick():
    marker = SpinningMarker()
    for _ in range(10):
        marker.spin()
    assert marker.angle() == pytest.approx(10 * constants.HEAD_SPIN, rel=1e-9)
    assert np.linalg.norm(marker.orientation) == pytest.approx(1.0)


def test_marker_geometry_follows_position_and_keeps_size():
    marker = SpinningMarker(size=0.15)
    marker.move_to((1.0, 2.0, 3.0))
    for _ in range(25):
        marker.spin()

    verts = marker.vertices()
    assert verts.shape == (8, 3)
    np.testing.assert_allclose(verts.mean(axis=0), [1.0, 2.0, 3.0], atol=1e-6)
    # edge between corner 0 and corner 1
    assert np.linalg.norm(verts[1] - verts[0]) == pytest.approx(0.15, rel=1e-6)
    # spin axis is vertical, so heights are untouched
    assert sorted(set(np.round(verts[:, 1], 6))) == pytest.approx([2.0 - 0.075, 2.0 + 0.075])

    faces = marker.faces()
    assert len(faces) == 6
    assert all(face.shape == (4, 3) for face in faces)
