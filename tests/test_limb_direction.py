"""Tests for the forearm-based club estimate."""

import math

import pytest

from core.domain import LandmarkName
from core.services.limb_direction import LimbDirectionEstimator

HANDS_DOWN = {
    LandmarkName.LEFT_ELBOW: (270.0, 260.0),
    LandmarkName.LEFT_WRIST: (300.0, 350.0),
    LandmarkName.RIGHT_ELBOW: (350.0, 260.0),
    LandmarkName.RIGHT_WRIST: (320.0, 350.0),
}


def test_club_extends_forearms(make_frame):
    club = LimbDirectionEstimator().estimate(make_frame(overrides=HANDS_DOWN))

    forearm = math.hypot(30.0, 90.0)
    assert club.grip.x == pytest.approx(310.0)
    assert club.grip.y == pytest.approx(350.0)
    assert club.head.x == pytest.approx(310.0)
    assert club.head.y == pytest.approx(350.0 + 2.5 * forearm)
    assert club.angle_deg == pytest.approx(90.0)


def test_low_confidence_arm_gives_no_estimate(make_frame):
    overrides = dict(HANDS_DOWN)
    overrides[LandmarkName.LEFT_ELBOW] = (270.0, 260.0, 0.39)

    assert LimbDirectionEstimator().estimate(make_frame(overrides=overrides)) is None


def test_confidence_threshold_is_inclusive(make_frame):
    overrides = dict(HANDS_DOWN)
    overrides[LandmarkName.LEFT_ELBOW] = (270.0, 260.0, 0.4)

    assert LimbDirectionEstimator().estimate(make_frame(overrides=overrides)) is not None


def test_missing_wrist_gives_no_estimate(make_frame):
    frame = make_frame(drop=(LandmarkName.RIGHT_WRIST,))

    assert LimbDirectionEstimator().estimate(frame) is None


def test_opposing_forearms_give_no_estimate(make_frame):
    overrides = {
        LandmarkName.LEFT_ELBOW: (270.0, 300.0),
        LandmarkName.LEFT_WRIST: (300.0, 300.0),
        LandmarkName.RIGHT_ELBOW: (350.0, 300.0),
        LandmarkName.RIGHT_WRIST: (320.0, 300.0),
    }

    assert LimbDirectionEstimator().estimate(make_frame(overrides=overrides)) is None
