"""Shared fixtures for stereo frame tests."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pytest

from vio_stereo.types import MonoFrame
from vio_stereo.config import StereoMatchingParams
from vio_stereo.core.stereo.calib import D_from_radtan4, K_from_intrinsics
from vio_stereo.core.stereo.rectify import StereoRectifier
from vio_stereo.core.stereo.stereo_frame import StereoFrame
from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoint

FX = 300.0
BASELINE = 0.2
IMG_SHAPE = (120, 160)

V = KeypointStatus.VALID


def kp(x: float, y: float, status: KeypointStatus = V) -> StatusKeypoint:
    return StatusKeypoint(status, x, y)


def make_mono(
    n: int,
    frame_id: int = 7,
    t_ns: int = 1_000,
    keypoints: Optional[np.ndarray] = None,
    landmarks: Optional[List[Optional[int]]] = None,
) -> MonoFrame:
    if keypoints is None:
        keypoints = np.array([[20.0 + 10 * i, 50.0] for i in range(n)], dtype=np.float32).reshape(-1, 2)
    if landmarks is None:
        landmarks = list(range(n))
    return MonoFrame(
        id=frame_id,
        timestamp=t_ns,
        img=np.zeros(IMG_SHAPE, dtype=np.uint8),
        keypoints=keypoints,
        scores=np.ones(len(keypoints), dtype=np.float32),
        landmarks=landmarks,
    )


def make_rectified_frame(
    right_statuses: Sequence[KeypointStatus],
    landmarks: Optional[List[Optional[int]]] = None,
    disparity: float = 10.0,
) -> StereoFrame:
    """Consistent rectified frame: rectified == raw pixels, depth FX*BASELINE/disparity for VALID points."""
    n = len(right_statuses)
    left = make_mono(n, landmarks=landmarks)
    right_kps = left.keypoints.copy()
    right_kps[:, 0] -= disparity
    right = make_mono(n, keypoints=right_kps, landmarks=[None] * n)

    sf = StereoFrame(left.id, left.timestamp, left, right)
    sf.set_rectified_images(left.img.copy(), right.img.copy())

    left_rect = [kp(float(x), float(y)) for x, y in left.keypoints]
    right_rect = [kp(float(x), float(y), st) for (x, y), st in zip(right_kps, right_statuses)]
    pts3d = np.zeros((n, 3))
    for i, st in enumerate(right_statuses):
        if st is V:
            pts3d[i] = [0.0, 0.0, FX * BASELINE / disparity]
    sf.set_rectified_keypoints(left_rect, right_rect, pts3d)
    return sf


@pytest.fixture
def matching_params() -> StereoMatchingParams:
    return StereoMatchingParams(min_point_dist=0.1, max_point_dist=15.0)


@pytest.fixture
def rectified_frame_factory():
    return make_rectified_frame


@pytest.fixture
def ideal_rectifier() -> StereoRectifier:
    """Undistorted, already-aligned rig: cam1 sits 0.11 m along +x of cam0."""
    K = K_from_intrinsics(458.0, 458.0, 376.0, 240.0)
    D = D_from_radtan4(0.0, 0.0, 0.0, 0.0)
    T_cam0_cam1 = np.eye(4)
    T_cam0_cam1[0, 3] = -0.11
    return StereoRectifier.from_calib(K, D, K, D, T_cam0_cam1, (752, 480))
