'''
Depth from rectified matches
depth = fx * baseline / disparity, disparity = uL - uR.
Right statuses are downgraded in place; a status is never upgraded here.
'''
from __future__ import annotations
import numpy as np

from vio_stereo.config import StereoMatchingParams
from vio_stereo.core.stereo.stereo_types import KeypointStatus, StatusKeypoints
from vio_stereo.exceptions import InvariantViolationError
from vio_stereo.log_config.logger import get_logger

logger = get_logger(__name__)


def get_depth_from_rectified_matches(
    left_keypoints_rectified: StatusKeypoints,
    right_keypoints_rectified: StatusKeypoints,   # mutated: statuses may be downgraded
    fx: float,
    baseline: float,
    params: StereoMatchingParams,
) -> np.ndarray:
    """
    Returns depths (N,) aligned with the inputs; 0.0 wherever no valid depth exists.
    """
    n = len(left_keypoints_rectified)
    if len(right_keypoints_rectified) != n:
        raise InvariantViolationError(
            f"get_depth_from_rectified_matches: size mismatch ({n} left vs "
            f"{len(right_keypoints_rectified)} right)",
            value=(n, len(right_keypoints_rectified)),
        )

    fx_b = fx * baseline
    depths = np.zeros(n, dtype=np.float64)
    nr_valid_depths = 0

    for i, (kl, kr) in enumerate(zip(left_keypoints_rectified, right_keypoints_rectified)):
        if not kl.is_valid:
            # cannot have a valid right without a valid left
            kr.status = kl.status
            continue
        if not kr.is_valid:
            continue

        disparity = kl.x - kr.x
        if disparity < 0.0:
            # right match was wrong
            kr.status = KeypointStatus.NO_DEPTH
            continue

        # zero disparity -> inf depth -> out of range below
        with np.errstate(divide="ignore", invalid="ignore"):
            depth = float(fx_b / np.float64(disparity))
        if not np.isfinite(depth) or depth < params.min_point_dist or depth > params.max_point_dist:
            kr.status = KeypointStatus.NO_DEPTH
            continue

        depths[i] = depth
        nr_valid_depths += 1

    logger.debug(f"Depth recovery: {nr_valid_depths}/{n} valid depths")
    return depths
