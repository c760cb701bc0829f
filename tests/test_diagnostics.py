"""Tests for per-status keypoint counts."""

from __future__ import annotations

import numpy as np
import pytest

from conftest import kp
from vio_stereo.core.stereo.diagnostics import (
    DebugTrackerInfo,
    check_status_right_keypoints,
    log_keypoint_stats,
)
from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoint
from vio_stereo.exceptions import UnknownKeypointStatusError


def test_counts_each_status():
    right = [
        kp(0, 0, KeypointStatus.VALID),
        kp(0, 0, KeypointStatus.VALID),
        kp(0, 0, KeypointStatus.NO_LEFT_RECT),
        kp(0, 0, KeypointStatus.NO_RIGHT_RECT),
        kp(0, 0, KeypointStatus.NO_DEPTH),
        kp(0, 0, KeypointStatus.NO_DEPTH),
        kp(0, 0, KeypointStatus.NO_DEPTH),
        kp(0, 0, KeypointStatus.FAILED_ARUN),
    ]

    info = check_status_right_keypoints(right)

    assert info == DebugTrackerInfo(
        nr_valid_rkp=2,
        nr_no_left_rect_rkp=1,
        nr_no_right_rect_rkp=1,
        nr_no_depth_rkp=3,
        nr_failed_arun_rkp=1,
    )


def test_counts_sum_to_sequence_length():
    rng = np.random.default_rng(7)
    statuses = list(KeypointStatus)
    for n in (0, 1, 17, 250):
        right = [kp(0, 0, statuses[rng.integers(len(statuses))]) for _ in range(n)]
        info = check_status_right_keypoints(right)
        assert info.total == n
        assert sum(info.as_dict().values()) == n


def test_does_not_modify_input():
    right = [kp(1, 2, KeypointStatus.NO_DEPTH)]
    check_status_right_keypoints(right)
    assert right[0].status is KeypointStatus.NO_DEPTH


@pytest.mark.parametrize("bad", [0, "VALID", None])
def test_unknown_status_raises(bad):
    right = [kp(0, 0), StatusKeypoint(bad, 0.0, 0.0)]

    with pytest.raises(UnknownKeypointStatusError, match="index 1"):
        check_status_right_keypoints(right)


def test_log_keypoint_stats_returns_counts():
    info = log_keypoint_stats([kp(0, 0), kp(0, 0, KeypointStatus.NO_DEPTH)])
    assert info.nr_valid_rkp == 1
    assert info.nr_no_depth_rkp == 1


def test_every_status_has_a_counter():
    right = [kp(0, 0, st) for st in KeypointStatus]
    info = check_status_right_keypoints(right)
    assert all(v == 1 for v in info.as_dict().values())
    assert info.total == len(KeypointStatus)
