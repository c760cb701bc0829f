'''
Smart stereo measurements for the backend: (landmark id, StereoPoint2(uL, uR, v)).
uR = NaN marks a monocular-only observation.
'''
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import math

from vio_stereo.types import LandmarkId
from vio_stereo.core.stereo.stereo_frame import StereoFrame
from vio_stereo.exceptions import NotRectifiedError
from vio_stereo.log_config.logger import LogEveryN, get_logger

logger = get_logger(__name__)

_drop_stereo_warning = LogEveryN(10)


@dataclass(frozen=True)
class StereoPoint2:
    uL: float
    uR: float   # NaN if missing
    v: float

    @property
    def has_right(self) -> bool:
        return not math.isnan(self.uR)


StereoMeasurement = Tuple[LandmarkId, StereoPoint2]
StereoMeasurements = List[StereoMeasurement]


def get_smart_stereo_measurements(frame: StereoFrame, use_stereo_measurements: bool) -> StereoMeasurements:
    if not frame.is_rectified:
        raise NotRectifiedError(f"StereoFrame {frame.id}: stereo pair is not rectified")
    # full consistency pass, O(N)
    frame.check()

    out: StereoMeasurements = []
    for i, lmk_id in enumerate(frame.left_frame.landmarks):
        if lmk_id is None:
            continue

        kl = frame.left_keypoints_rectified[i]
        uR = math.nan
        if not use_stereo_measurements:
            if _drop_stereo_warning():
                logger.warning("Dropping stereo information: uR = NaN! (enable use_stereo_measurements to use it)")
        elif frame.right_keypoints_rectified[i].is_valid:
            uR = frame.right_keypoints_rectified[i].x

        out.append((lmk_id, StereoPoint2(uL=kl.x, uR=uR, v=kl.y)))
    return out
