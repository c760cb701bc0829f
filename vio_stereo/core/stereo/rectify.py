from __future__ import annotations
from dataclasses import dataclass
from typing import Literal
import numpy as np
import cv2

from vio_stereo.core.stereo.calib import StereoCalibRectified
from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoints, status_keypoints_from_arrays

Side = Literal["left", "right"]


@dataclass
class StereoRectifier:
    map1_x: np.ndarray
    map1_y: np.ndarray
    map2_x: np.ndarray
    map2_y: np.ndarray
    K_rect: np.ndarray   # rectified intrinsics (3x3)
    baseline_m: float
    # kept for point rectification
    K0: np.ndarray
    D0: np.ndarray
    K1: np.ndarray
    D1: np.ndarray
    R1: np.ndarray
    R2: np.ndarray
    P1: np.ndarray
    P2: np.ndarray
    image_size: tuple[int, int]   # (w,h)

    @staticmethod
    def from_calib(
            K0: np.ndarray, D0: np.ndarray,
            K1: np.ndarray, D1: np.ndarray,
            T_cam0_cam1: np.ndarray,      # 4x4 transform from cam0 to cam1
            image_size: tuple[int, int],  # (w,h)
        ) -> "StereoRectifier":

        w, h = image_size
        R = T_cam0_cam1[:3, :3].astype(np.float64)
        t = T_cam0_cam1[:3, 3].astype(np.float64).reshape(3, 1)

        # stereoRectify gives rectification rotations and new projection matrices
        R1, R2, P1, P2, _, _, _ = cv2.stereoRectify(
            K0, D0, K1, D1, (w, h), R, t,
            flags=cv2.CALIB_ZERO_DISPARITY,
            alpha=0
        )

        # Rectification maps (compute once)
        map1_x, map1_y = cv2.initUndistortRectifyMap(K0, D0, R1, P1, (w, h), cv2.CV_32FC1)
        map2_x, map2_y = cv2.initUndistortRectifyMap(K1, D1, R2, P2, (w, h), cv2.CV_32FC1)

        # Rectified intrinsics are embedded in P1 (left projection)
        K_rect = P1[:3, :3].copy()

        # Baseline magnitude in rectified coordinates: b = -P2[0,3] / fx
        fx = K_rect[0, 0]
        baseline_m = abs(P2[0, 3]) / fx

        return StereoRectifier(
            map1_x, map1_y, map2_x, map2_y, K_rect, float(baseline_m),
            K0=K0, D0=D0, K1=K1, D1=D1, R1=R1, R2=R2, P1=P1, P2=P2,
            image_size=(int(w), int(h)),
        )

    @property
    def calib(self) -> StereoCalibRectified:
        return StereoCalibRectified.from_K_rect(self.K_rect, self.baseline_m)

    def rectify_pair(self, img0: np.ndarray, img1: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        r0 = cv2.remap(img0, self.map1_x, self.map1_y, interpolation=cv2.INTER_LINEAR)
        r1 = cv2.remap(img1, self.map2_x, self.map2_y, interpolation=cv2.INTER_LINEAR)
        return r0, r1

    def rectify_points(self, pts: np.ndarray, side: Side) -> np.ndarray:
        """
        pts: (N,2) raw pixels
        Returns (N,2) rectified pixels.
        """
        pts = np.asarray(pts, dtype=np.float64).reshape(-1, 1, 2)
        if pts.shape[0] == 0:
            return np.zeros((0, 2), dtype=np.float64)
        if side == "left":
            K, D, R, P = self.K0, self.D0, self.R1, self.P1
        else:
            K, D, R, P = self.K1, self.D1, self.R2, self.P2
        out = cv2.undistortPoints(pts, K, D, R=R, P=P)
        return out.reshape(-1, 2).astype(np.float64)

    def rectify_keypoints(self, pts: np.ndarray, side: Side) -> StatusKeypoints:
        """
        Rectified keypoints with status: VALID if inside the rectified image,
        else NO_LEFT_RECT / NO_RIGHT_RECT depending on side.
        """
        fail = KeypointStatus.NO_LEFT_RECT if side == "left" else KeypointStatus.NO_RIGHT_RECT
        rect = self.rectify_points(pts, side)
        w, h = self.image_size

        u, v = rect[:, 0], rect[:, 1]
        with np.errstate(invalid="ignore"):
            inside = np.isfinite(u) & np.isfinite(v) & (u >= 0) & (u < w) & (v >= 0) & (v < h)
        statuses = [KeypointStatus.VALID if ok else fail for ok in inside]
        return status_keypoints_from_arrays(statuses, rect)
