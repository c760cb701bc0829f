# vio_stereo/frontend/stereo_frontend.py
# Builds one checked, published StereoFrame per synchronized image pair
from __future__ import annotations

from typing import Optional, Sequence

from vio_stereo.types import MonoFrame
from vio_stereo.config import StereoConfig, default_config
from vio_stereo.core.stereo.rectify import StereoRectifier
from vio_stereo.core.stereo.stereo_frame import EPIPOLAR_TOLERANCE_PX, StereoFrame
from vio_stereo.core.stereo.stereo_types import KeypointStatus
from vio_stereo.core.stereo.depth import get_depth_from_rectified_matches
from vio_stereo.core.stereo.triangulation import keypoints_3d_from_depths
from vio_stereo.core.stereo.diagnostics import DebugTrackerInfo, check_status_right_keypoints
from vio_stereo.core.stereo.measurements import StereoMeasurements, get_smart_stereo_measurements
from vio_stereo.exceptions import InvariantViolationError
from vio_stereo.log_config.logger import get_logger
from vio_stereo.viz.drawing import show_rectified

logger = get_logger(__name__)


class StereoFrameBuilder:
    def __init__(self, rectifier: StereoRectifier, config: Optional[StereoConfig] = None):
        self.rectifier = rectifier
        self.config = config or default_config()
        self.calib = rectifier.calib
        self.last_debug_info: Optional[DebugTrackerInfo] = None

    def build(
        self,
        left_frame: MonoFrame,
        right_frame: MonoFrame,            # keypoints[i] = right match of left keypoints[i]
        right_statuses: Optional[Sequence[KeypointStatus]] = None,   # from left-right matching; None = all matched
        is_keyframe: bool = False,
    ) -> StereoFrame:
        n = left_frame.nr_keypoints
        if right_frame.nr_keypoints != n:
            raise InvariantViolationError(
                f"build: right frame has {right_frame.nr_keypoints} keypoints, left has {n}",
                value=right_frame.nr_keypoints,
            )
        if right_statuses is None:
            right_statuses = [KeypointStatus.VALID] * n
        if len(right_statuses) != n:
            raise InvariantViolationError(
                f"build: {len(right_statuses)} right statuses for {n} keypoints", value=len(right_statuses)
            )

        sf = StereoFrame(left_frame.id, left_frame.timestamp, left_frame, right_frame)

        # 1) rectify images + keypoints
        left_r, right_r = self.rectifier.rectify_pair(sf.left_frame.img, sf.right_frame.img)
        sf.set_rectified_images(left_r, right_r)

        left_kps = self.rectifier.rectify_keypoints(sf.left_frame.keypoints, "left")
        right_kps = self.rectifier.rectify_keypoints(sf.right_frame.keypoints, "right")
        n_off_row = 0
        for kl, kr, st in zip(left_kps, right_kps, right_statuses):
            if st is not KeypointStatus.VALID:
                kr.status = st   # a failed match outranks a successful rectification
            elif kl.is_valid and kr.is_valid and abs(kr.y - kl.y) > EPIPOLAR_TOLERANCE_PX:
                kr.status = KeypointStatus.NO_RIGHT_RECT   # match off the epipolar row
                n_off_row += 1
        if n_off_row:
            logger.debug(f"frame {sf.id}: dropped {n_off_row} matches off the epipolar row")

        # 2) depth (downgrades right statuses in place) + 3D points
        depths = get_depth_from_rectified_matches(
            left_kps, right_kps, self.calib.fx, self.calib.baseline_m, self.config.stereo_matching
        )
        keypoints_3d = keypoints_3d_from_depths(left_kps, depths, self.calib)
        sf.set_rectified_keypoints(left_kps, right_kps, keypoints_3d)
        sf.set_is_keyframe(is_keyframe)

        # 3) validation + publish
        fp = self.config.frontend
        if fp.check_stereo_frame:
            sf.check()
        if fp.freeze_frames:
            sf.freeze()

        self.last_debug_info = check_status_right_keypoints(sf.right_keypoints_rectified)
        logger.debug(f"{sf.summary()} status counts: {self.last_debug_info.as_dict()}")

        if fp.write_rectified:
            show_rectified(sf, visualize=False, write=True, output_dir=fp.output_dir)

        return sf

    def measurements(self, frame: StereoFrame) -> StereoMeasurements:
        return get_smart_stereo_measurements(frame, self.config.frontend.use_stereo_measurements)
