# per-status keypoint counts for telemetry
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict

from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoints
from vio_stereo.exceptions import UnknownKeypointStatusError
from vio_stereo.log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DebugTrackerInfo:
    nr_valid_rkp: int = 0
    nr_no_left_rect_rkp: int = 0
    nr_no_right_rect_rkp: int = 0
    nr_no_depth_rkp: int = 0
    nr_failed_arun_rkp: int = 0

    @property
    def total(self) -> int:
        return (self.nr_valid_rkp + self.nr_no_left_rect_rkp + self.nr_no_right_rect_rkp
                + self.nr_no_depth_rkp + self.nr_failed_arun_rkp)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


_FIELD_BY_STATUS = {
    KeypointStatus.VALID: "nr_valid_rkp",
    KeypointStatus.NO_LEFT_RECT: "nr_no_left_rect_rkp",
    KeypointStatus.NO_RIGHT_RECT: "nr_no_right_rect_rkp",
    KeypointStatus.NO_DEPTH: "nr_no_depth_rkp",
    KeypointStatus.FAILED_ARUN: "nr_failed_arun_rkp",
}
_missing = set(KeypointStatus) - set(_FIELD_BY_STATUS)
if _missing:
    raise UnknownKeypointStatusError(f"no DebugTrackerInfo counter for {sorted(s.name for s in _missing)}")


def check_status_right_keypoints(right_keypoints_rectified: StatusKeypoints) -> DebugTrackerInfo:
    info = DebugTrackerInfo()
    for i, kp in enumerate(right_keypoints_rectified):
        field_name = _FIELD_BY_STATUS.get(kp.status) if isinstance(kp.status, KeypointStatus) else None
        if field_name is None:
            raise UnknownKeypointStatusError(f"Unknown keypoint status {kp.status!r} at index {i}")
        setattr(info, field_name, getattr(info, field_name) + 1)
    return info


def log_keypoint_stats(right_keypoints_rectified: StatusKeypoints) -> DebugTrackerInfo:
    info = check_status_right_keypoints(right_keypoints_rectified)
    logger.info(
        f"Nr of right keypoints: {len(right_keypoints_rectified)} of which:\n"
        f"nrValid: {info.nr_valid_rkp}\n"
        f"nrNoLeftRect: {info.nr_no_left_rect_rkp}\n"
        f"nrNoRightRect: {info.nr_no_right_rect_rkp}\n"
        f"nrNoDepth: {info.nr_no_depth_rkp}\n"
        f"nrFailedArun: {info.nr_failed_arun_rkp}"
    )
    return info
