'''
Stereo frame: a left/right MonoFrame pair plus per-point rectified keypoints and 3D points.

Lifecycle
- built once per synchronized pair, mutable during a short construction window
  (rectified images, rectified keypoints, keyframe flag)
- freeze() checks invariants and publishes it read-only for backend / viz
'''
from __future__ import annotations
from typing import Optional
import numpy as np

from vio_stereo.types import FrameId, MonoFrame, Timestamp
from vio_stereo.core.stereo.stereo_types import StatusKeypoints
from vio_stereo.exceptions import (
    FrameMismatchError,
    FrozenFrameError,
    InvariantViolationError,
)
from vio_stereo.log_config.logger import get_logger

logger = get_logger(__name__)

# max |vL - vR| for a VALID rectified pair (px); fixed, not a tuning knob
EPIPOLAR_TOLERANCE_PX = 3.0


class StereoFrame:
    def __init__(self, id: FrameId, timestamp: Timestamp, left_frame: MonoFrame, right_frame: MonoFrame):
        for side, f in (("left", left_frame), ("right", right_frame)):
            if f.id != id:
                raise FrameMismatchError(f"StereoFrame {id}: {side} frame has id {f.id}")
            if f.timestamp != timestamp:
                raise FrameMismatchError(
                    f"StereoFrame {id}: {side} frame has timestamp {f.timestamp}, expected {timestamp}"
                )

        self.id = id
        self.timestamp = timestamp
        self.left_frame = left_frame.copy()
        self.right_frame = right_frame.copy()

        self.is_keyframe = False
        self.is_rectified = False
        self.left_img_rectified: Optional[np.ndarray] = None
        self.right_img_rectified: Optional[np.ndarray] = None

        self.keypoints_3d = np.zeros((0, 3), dtype=np.float64)
        self.left_keypoints_rectified: StatusKeypoints = []
        self.right_keypoints_rectified: StatusKeypoints = []

        self._frozen = False

    # ---------- construction window ----------

    def set_rectified_images(self, left_img: np.ndarray, right_img: np.ndarray) -> None:
        # does not touch is_rectified
        self._ensure_mutable("set_rectified_images")
        self.left_img_rectified = left_img
        self.right_img_rectified = right_img

    def set_is_keyframe(self, is_kf: bool) -> None:
        self._ensure_mutable("set_is_keyframe")
        self.is_keyframe = bool(is_kf)
        self.left_frame.is_keyframe = self.is_keyframe
        self.right_frame.is_keyframe = self.is_keyframe

    def set_rectified_keypoints(
        self,
        left_keypoints_rectified: StatusKeypoints,
        right_keypoints_rectified: StatusKeypoints,
        keypoints_3d: np.ndarray,
    ) -> None:
        """Install per-point rectified data and mark the frame rectified.

        Every sequence must be aligned with the left keypoints; nothing is stored otherwise.
        """
        self._ensure_mutable("set_rectified_keypoints")
        keypoints_3d = np.asarray(keypoints_3d, dtype=np.float64).reshape(-1, 3)
        n = self.left_frame.nr_keypoints
        for name, size in (
            ("left_keypoints_rectified", len(left_keypoints_rectified)),
            ("right_keypoints_rectified", len(right_keypoints_rectified)),
            ("keypoints_3d", keypoints_3d.shape[0]),
        ):
            if size != n:
                raise InvariantViolationError(
                    f"set_rectified_keypoints: {name} has {size} entries, expected {n}",
                    value=size,
                )

        self.left_keypoints_rectified = list(left_keypoints_rectified)
        self.right_keypoints_rectified = list(right_keypoints_rectified)
        self.keypoints_3d = keypoints_3d
        self.is_rectified = True

    def freeze(self) -> "StereoFrame":
        # single transition to the published, read-only state
        if not self._frozen:
            self.check()
            self.keypoints_3d.flags.writeable = False
            for img in (self.left_img_rectified, self.right_img_rectified):
                if img is not None:
                    img.flags.writeable = False
            self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _ensure_mutable(self, op: str) -> None:
        if self._frozen:
            raise FrozenFrameError(f"StereoFrame {self.id}: {op} called on a frozen frame")

    # ---------- queries ----------

    @property
    def nr_keypoints(self) -> int:
        return self.left_frame.nr_keypoints

    def check(self) -> None:
        check_stereo_frame(self)

    def summary(self) -> str:
        return (
            f"StereoFrame(id={self.id}, t={self.timestamp}, kf={self.is_keyframe}, "
            f"rectified={self.is_rectified}, nL={self.left_frame.nr_keypoints}, "
            f"nR={self.right_frame.nr_keypoints}, n3d={self.keypoints_3d.shape[0]})"
        )

    def log_summary(self) -> None:
        logger.info(
            "=====================\n"
            f"id: {self.id}\n"
            f"timestamp: {self.timestamp}\n"
            f"is_keyframe: {self.is_keyframe}\n"
            f"nr keypoints in left: {self.left_frame.nr_keypoints}\n"
            f"nr keypoints in right: {self.right_frame.nr_keypoints}\n"
            f"nr keypoints_3d: {self.keypoints_3d.shape[0]}"
        )

    def __repr__(self) -> str:
        return self.summary()


def check_stereo_frame(frame: StereoFrame) -> None:
    """
    Structural + geometric consistency pass, O(N).
    Raises InvariantViolationError on the first failed check.
    """
    n = frame.left_frame.nr_keypoints
    sizes = (
        ("left_frame.scores", frame.left_frame.scores.shape[0]),
        ("left_frame.landmarks", len(frame.left_frame.landmarks)),
        ("right_frame.keypoints", frame.right_frame.nr_keypoints),
        ("keypoints_3d", frame.keypoints_3d.shape[0]),
        ("left_keypoints_rectified", len(frame.left_keypoints_rectified)),
        ("right_keypoints_rectified", len(frame.right_keypoints_rectified)),
    )
    for name, size in sizes:
        if size != n:
            raise InvariantViolationError(
                f"check_stereo_frame: {name} has {size} entries, expected {n}", value=size
            )

    for i in range(n):
        kr = frame.right_keypoints_rectified[i]
        kl = frame.left_keypoints_rectified[i]
        z = float(frame.keypoints_3d[i, 2])

        if kr.is_valid:
            dv = abs(kr.y - kl.y)
            if dv > EPIPOLAR_TOLERANCE_PX:
                raise InvariantViolationError(
                    f"check_stereo_frame: rectified keypoints have different y "
                    f"{kr.y} vs. {kl.y} at index {i}",
                    index=i, value=dv,
                )
            raw_r = frame.right_frame.keypoints[i]
            if abs(float(raw_r[0])) + abs(float(raw_r[1])) == 0.0:
                raise InvariantViolationError(
                    f"check_stereo_frame: right_frame.keypoints[{i}] is zero", index=i, value=(0.0, 0.0)
                )
            if not z > 0.0:
                raise InvariantViolationError(
                    f"check_stereo_frame: keypoints_3d[{i}] has nonpositive depth {z} for valid point "
                    f"(left {frame.left_frame.keypoints[i]}, right {raw_r}, right rect {kr})",
                    index=i, value=z,
                )
        elif z > 0.0:
            raise InvariantViolationError(
                f"check_stereo_frame: keypoints_3d[{i}] has positive depth {z} for "
                f"nonvalid point ({kr.status.name})",
                index=i, value=z,
            )
