'''
Triangulation (rectified)
Back-project left rectified pixels with their recovered depth.
'''
from __future__ import annotations
import numpy as np

from vio_stereo.core.stereo.calib import StereoCalibRectified
from vio_stereo.core.stereo.stereo_types import StatusKeypoints
from vio_stereo.exceptions import InvariantViolationError


def back_project(u: float, v: float, Z: float, calib: StereoCalibRectified) -> np.ndarray:
    X = (u - calib.cx) * Z / calib.fx
    Y = (v - calib.cy) * Z / calib.fy
    return np.array([X, Y, Z], dtype=np.float64)


def keypoints_3d_from_depths(left_keypoints_rectified: StatusKeypoints,
                             depths: np.ndarray,
                             calib: StereoCalibRectified) -> np.ndarray:
    """
    Returns (N,3) points in the rectified left camera frame.
    Points without a positive depth stay at the origin (Z = 0).
    """
    depths = np.asarray(depths, dtype=np.float64).reshape(-1)
    if depths.shape[0] != len(left_keypoints_rectified):
        raise InvariantViolationError(
            f"keypoints_3d_from_depths: {depths.shape[0]} depths vs "
            f"{len(left_keypoints_rectified)} keypoints",
            value=(depths.shape[0], len(left_keypoints_rectified)),
        )

    pts = np.zeros((depths.shape[0], 3), dtype=np.float64)
    for i, (kp, Z) in enumerate(zip(left_keypoints_rectified, depths)):
        if Z > 0.0:
            pts[i] = back_project(kp.x, kp.y, float(Z), calib)
    return pts
