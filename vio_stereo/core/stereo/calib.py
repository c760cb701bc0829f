# vio_stereo/core/stereo/calib.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np


@dataclass(frozen=True)
class StereoCalibRectified:
    fx: float
    fy: float
    cx: float
    cy: float
    baseline_m: float

    @staticmethod
    def from_K_rect(K_rect: np.ndarray, baseline_m: float) -> "StereoCalibRectified":
        return StereoCalibRectified(
            fx=float(K_rect[0, 0]),
            fy=float(K_rect[1, 1]),
            cx=float(K_rect[0, 2]),
            cy=float(K_rect[1, 2]),
            baseline_m=float(baseline_m),
        )


# Raw (unrectified) calibration, kalibr/EuRoC YAML conventions

def K_from_intrinsics(fu: float, fv: float, cu: float, cv: float) -> np.ndarray:
    return np.array([[fu, 0.0, cu],
                     [0.0, fv, cv],
                     [0.0, 0.0, 1.0]], dtype=np.float64)


def D_from_radtan4(k1: float, k2: float, p1: float, p2: float) -> np.ndarray:
    # OpenCV order: k1, k2, p1, p2, k3
    return np.array([k1, k2, p1, p2, 0.0], dtype=np.float64)


def T_from_yaml_data(data_list: Sequence[float]) -> np.ndarray:
    return np.array(data_list, dtype=np.float64).reshape(4, 4)


def T_cam0_cam1_from_T_BS(T_BS0: np.ndarray, T_BS1: np.ndarray) -> np.ndarray:
    # cam0 -> cam1
    return np.linalg.inv(T_BS1) @ T_BS0
