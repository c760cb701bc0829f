"""Tests for stereo frame drawing helpers."""

from __future__ import annotations

import numpy as np
import pytest

from conftest import kp, make_mono, make_rectified_frame
from vio_stereo.core.stereo.stereo_frame import StereoFrame
from vio_stereo.core.stereo.stereo_types import KeypointStatus
from vio_stereo.exceptions import InvariantViolationError, NotRectifiedError
from vio_stereo.viz import drawing
from vio_stereo.viz.drawing import (
    concatenate_two_images,
    draw_corners_matches,
    draw_epipolar_lines,
    draw_left_right_corners_matches,
    left_right_matches,
    show_left_right_matches,
    show_original,
    show_rectified,
)

V = KeypointStatus.VALID


@pytest.fixture(autouse=True)
def no_windows(monkeypatch):
    monkeypatch.setattr(drawing, "just_show", lambda img, title="image": None)


def test_concatenate_pads_shorter_image():
    a = np.full((10, 4), 255, np.uint8)
    b = np.zeros((6, 3, 3), np.uint8)

    canvas = concatenate_two_images(a, b)

    assert canvas.shape == (10, 7, 3)
    assert np.all(canvas[:, :4] == 255)
    assert np.all(canvas[6:, 4:] == 0)


def test_epipolar_lines_are_green_rows():
    img = np.zeros((32, 20), np.uint8)

    canvas = draw_epipolar_lines(img, img, num_lines=3)

    gap = 32 // 4
    for l in range(3):
        row = canvas[(l + 1) * gap]
        assert np.all(row[:, 1] == 255)
    assert not canvas[1].any()


def test_left_right_matches_are_identity_pairs():
    assert left_right_matches(3) == [(0, 0), (1, 1), (2, 2)]
    assert left_right_matches(0) == []


def test_draw_corners_matches_connects_valid_only():
    img = np.zeros((40, 40), np.uint8)
    kps1 = [kp(5.0, 10.0), kp(5.0, 30.0)]
    kps2 = [kp(5.0, 10.0), kp(5.0, 30.0, KeypointStatus.NO_DEPTH)]

    canvas = draw_corners_matches(img, kps1, img, kps2, left_right_matches(2))

    assert canvas[10, 20].any()        # line across the seam
    assert not canvas[30, 20].any()    # invalid pair not connected
    patch = canvas[25:36, 0:11]
    assert (patch[..., 2] == 255).any()
    assert not patch[..., 0].any()


def test_draw_on_unrectified_frame_raises():
    left, right = make_mono(2), make_mono(2)
    sf = StereoFrame(left.id, left.timestamp, left, right)

    with pytest.raises(NotRectifiedError):
        show_rectified(sf)
    with pytest.raises(NotRectifiedError):
        draw_left_right_corners_matches(sf, [])


def test_show_rectified_writes_named_image(tmp_path):
    sf = make_rectified_frame([V, V])

    canvas = show_rectified(sf, visualize=True, write=True, output_dir=tmp_path)

    assert (tmp_path / f"rectified_{sf.id}.png").exists()
    assert canvas.shape[1] == 2 * sf.left_img_rectified.shape[1]


def test_draw_left_right_corners_matches_on_rectified_frame():
    sf = make_rectified_frame([V, V, KeypointStatus.NO_RIGHT_RECT])
    canvas = draw_left_right_corners_matches(sf, left_right_matches(3), random_color=True)
    assert canvas.shape == (sf.left_img_rectified.shape[0], 2 * sf.left_img_rectified.shape[1], 3)


def test_show_original_and_matches():
    sf = make_rectified_frame([V, V])
    assert show_original(sf).shape[2] == 3
    assert show_left_right_matches(sf).shape[2] == 3


def test_show_left_right_matches_requires_equal_counts():
    left, right = make_mono(3), make_mono(2)
    sf = StereoFrame(left.id, left.timestamp, left, right)

    with pytest.raises(InvariantViolationError):
        show_left_right_matches(sf)
