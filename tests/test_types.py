"""Tests for frame and keypoint value types."""

from __future__ import annotations

import numpy as np
import pytest

from vio_stereo.types import MonoFrame
from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoint, status_keypoints_from_arrays
from vio_stereo.exceptions import InvariantViolationError


def test_empty_mono_frame():
    f = MonoFrame.empty(1, 10, np.zeros((4, 4), np.uint8))
    assert f.nr_keypoints == 0
    assert f.keypoints.shape == (0, 2)
    assert f.scores.shape == (0,)
    assert f.landmarks == []
    assert not f.is_keyframe


def test_mono_frame_copy_is_deep():
    f = MonoFrame(1, 10, np.zeros((4, 4), np.uint8), keypoints=[[1.0, 2.0]], scores=[0.5], landmarks=[None])
    g = f.copy()

    g.img[0, 0] = 9
    g.keypoints[0, 0] = 7.0
    g.landmarks[0] = 3

    assert f.img[0, 0] == 0
    assert f.keypoints[0, 0] == 1.0
    assert f.landmarks == [None]


def test_status_keypoint_accessors():
    k = StatusKeypoint(KeypointStatus.VALID, 3.0, 4.0)
    assert k.is_valid
    np.testing.assert_array_equal(k.px, [3.0, 4.0])
    assert not StatusKeypoint(KeypointStatus.NO_DEPTH, 0.0, 0.0).is_valid


def test_valid_ranks_above_failures():
    assert all(st.rank < KeypointStatus.VALID.rank for st in KeypointStatus if st is not KeypointStatus.VALID)


def test_status_keypoints_from_arrays():
    kps = status_keypoints_from_arrays(
        [KeypointStatus.VALID, KeypointStatus.NO_RIGHT_RECT], np.array([[[1.0, 2.0]], [[3.0, 4.0]]])
    )
    assert [(k.status, k.x, k.y) for k in kps] == [
        (KeypointStatus.VALID, 1.0, 2.0),
        (KeypointStatus.NO_RIGHT_RECT, 3.0, 4.0),
    ]

    with pytest.raises(InvariantViolationError):
        status_keypoints_from_arrays([KeypointStatus.VALID], np.zeros((2, 2)))
