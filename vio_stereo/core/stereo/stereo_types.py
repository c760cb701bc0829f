# core data types for stereo keypoints
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence
import numpy as np

from vio_stereo.exceptions import InvariantViolationError


class KeypointStatus(Enum):
    VALID = 0
    NO_LEFT_RECT = 1     # left pixel could not be rectified
    NO_RIGHT_RECT = 2    # right pixel could not be rectified / no right match
    NO_DEPTH = 3         # rectified, but depth invalid or out of range
    FAILED_ARUN = 4      # pose-from-points (Arun) failed using this point

    @property
    def is_valid(self) -> bool:
        return self is KeypointStatus.VALID

    @property
    def rank(self) -> int:
        # VALID sits above every failure state; failures are not ordered among themselves
        return 1 if self is KeypointStatus.VALID else 0


@dataclass
class StatusKeypoint:
    status: KeypointStatus
    x: float
    y: float

    @property
    def is_valid(self) -> bool:
        return self.status is KeypointStatus.VALID

    @property
    def px(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)


StatusKeypoints = List[StatusKeypoint]


def status_keypoints_from_arrays(statuses: Sequence[KeypointStatus], pixels: np.ndarray) -> StatusKeypoints:
    """
    statuses: (N,) KeypointStatus
    pixels: (N,2) or (N,1,2) rectified pixels
    """
    pts = np.asarray(pixels, dtype=np.float64).reshape(-1, 2)
    if len(statuses) != pts.shape[0]:
        raise InvariantViolationError(
            f"status_keypoints_from_arrays: {len(statuses)} statuses vs {pts.shape[0]} pixels",
            value=(len(statuses), pts.shape[0]),
        )
    return [StatusKeypoint(st, float(p[0]), float(p[1])) for st, p in zip(statuses, pts)]
