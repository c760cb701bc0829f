"""Drawing helpers for stereo frames: epipolar overlays and left/right matches."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from vio_stereo.core.stereo.stereo_types import StatusKeypoint
from vio_stereo.exceptions import InvariantViolationError, NotRectifiedError
from vio_stereo.log_config.logger import get_logger

logger = get_logger(__name__)

GREEN = (0, 255, 0)
RED = (0, 0, 255)
CYAN = (255, 255, 0)

Match = Tuple[int, int]   # (left index, right index)


def _to_bgr(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    return img.copy()


def concatenate_two_images(img1: np.ndarray, img2: np.ndarray) -> np.ndarray:
    """Side-by-side BGR canvas; the shorter image is padded at the bottom."""
    a, b = _to_bgr(img1), _to_bgr(img2)
    h = max(a.shape[0], b.shape[0])
    canvas = np.zeros((h, a.shape[1] + b.shape[1], 3), dtype=np.uint8)
    canvas[:a.shape[0], :a.shape[1]] = a
    canvas[:b.shape[0], a.shape[1]:] = b
    return canvas


def draw_epipolar_lines(img1: np.ndarray, img2: np.ndarray, num_lines: int = 15) -> np.ndarray:
    canvas = concatenate_two_images(img1, img2)
    line_gap = canvas.shape[0] // (num_lines + 1)
    for l in range(num_lines):
        y = (l + 1) * line_gap
        cv2.line(canvas, (0, y), (canvas.shape[1] - 1, y), GREEN, 1)
    return canvas


def _xy(kp) -> Tuple[float, float]:
    if isinstance(kp, StatusKeypoint):
        return kp.x, kp.y
    return float(kp[0]), float(kp[1])


def left_right_matches(n: int) -> List[Match]:
    # keypoints are ordered the same way in left and right
    return [(i, i) for i in range(n)]


def draw_corners_matches(
    img1: np.ndarray,
    kps1: Sequence,
    img2: np.ndarray,
    kps2: Sequence,
    matches: Sequence[Match],
    random_color: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    kps1/kps2: StatusKeypoints or (N,2) pixel arrays.
    Invalid StatusKeypoints are drawn in red and not connected.
    """
    canvas = concatenate_two_images(img1, img2)
    offset = img1.shape[1]
    rng = rng or np.random.default_rng()

    for i, j in matches:
        k1, k2 = kps1[i], kps2[j]
        x1, y1 = _xy(k1)
        x2, y2 = _xy(k2)
        p1 = (int(round(x1)), int(round(y1)))
        p2 = (int(round(x2)) + offset, int(round(y2)))

        valid = all(getattr(k, "is_valid", True) for k in (k1, k2))
        if not valid:
            cv2.circle(canvas, p1, 3, RED, 1)
            cv2.circle(canvas, p2, 3, RED, 1)
            continue

        color = tuple(int(c) for c in rng.integers(0, 256, size=3)) if random_color else CYAN
        cv2.circle(canvas, p1, 3, color, 1)
        cv2.circle(canvas, p2, 3, color, 1)
        cv2.line(canvas, p1, p2, color, 1)
    return canvas


def draw_left_right_corners_matches(frame, matches: Sequence[Match], random_color: bool = False) -> np.ndarray:
    if not frame.is_rectified or frame.left_img_rectified is None:
        raise NotRectifiedError(f"StereoFrame {frame.id}: no rectified images to draw on")
    return draw_corners_matches(
        frame.left_img_rectified, frame.left_keypoints_rectified,
        frame.right_img_rectified, frame.right_keypoints_rectified,
        matches, random_color,
    )


def just_show(img: np.ndarray, title: str = "image") -> None:
    cv2.imshow(title, img)
    cv2.waitKey(1)


def show_rectified(frame, visualize: bool = True, write: bool = False,
                   output_dir: Path | str = "outputImages") -> np.ndarray:
    if not frame.is_rectified or frame.left_img_rectified is None:
        raise NotRectifiedError(f"StereoFrame {frame.id}: stereo pair is not rectified")

    canvas = draw_epipolar_lines(frame.left_img_rectified, frame.right_img_rectified, 15)
    if write:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        img_path = out / f"rectified_{frame.id}.png"
        if not cv2.imwrite(str(img_path), canvas):
            logger.warning(f"Failed to write {img_path}")
        else:
            logger.debug(f"Wrote {img_path}")
    if visualize:
        just_show(canvas, "Rectified!")
    return canvas


def show_original(frame, visualize: bool = True) -> np.ndarray:
    canvas = concatenate_two_images(frame.left_frame.img, frame.right_frame.img)
    if visualize:
        just_show(canvas, "original: left-right")
    return canvas


def show_left_right_matches(frame, visualize: bool = True) -> np.ndarray:
    nl, nr = frame.left_frame.nr_keypoints, frame.right_frame.nr_keypoints
    if nl != nr:
        raise InvariantViolationError(
            f"show_left_right_matches: nr of corners in left ({nl}) and right ({nr}) must be the same",
            value=(nl, nr),
        )
    canvas = draw_corners_matches(
        frame.left_frame.img, frame.left_frame.keypoints,
        frame.right_frame.img, frame.right_frame.keypoints,
        left_right_matches(nl),
    )
    if visualize:
        just_show(canvas, "match_visualization")
    return canvas
