"""
Shared fixtures: a synthetic golfer facing the camera.

Hands are the midpoint of both wrists, so every frame is built around a
hand position; the rest of the body stays put unless overridden.
"""

import pytest

from core.domain import Landmark, LandmarkName, PoseFrame

FPS = 30
FRAME_MS = 1000.0 / FPS

# (x, y) in pixels, y down. Wrists are placed around the hand position.
BASE_BODY = {
    LandmarkName.NOSE: (310.0, 140.0),
    LandmarkName.LEFT_EYE: (300.0, 132.0),
    LandmarkName.RIGHT_EYE: (320.0, 132.0),
    LandmarkName.LEFT_EAR: (292.0, 138.0),
    LandmarkName.RIGHT_EAR: (328.0, 138.0),
    LandmarkName.LEFT_SHOULDER: (280.0, 200.0),
    LandmarkName.RIGHT_SHOULDER: (340.0, 200.0),
    LandmarkName.LEFT_ELBOW: (270.0, 260.0),
    LandmarkName.RIGHT_ELBOW: (350.0, 260.0),
    LandmarkName.LEFT_HIP: (290.0, 330.0),
    LandmarkName.RIGHT_HIP: (330.0, 330.0),
    LandmarkName.LEFT_KNEE: (285.0, 420.0),
    LandmarkName.RIGHT_KNEE: (335.0, 420.0),
    LandmarkName.LEFT_ANKLE: (285.0, 510.0),
    LandmarkName.RIGHT_ANKLE: (335.0, 510.0),
}


def build_frame(
    hand=(310.0, 350.0),
    confidence=0.9,
    timestamp_ms=0.0,
    frame_number=0,
    overrides=None,
    drop=(),
):
    """
    Args:
        hand: Wrist midpoint (x, y)
        confidence: Confidence for every landmark not overridden
        overrides: {LandmarkName: (x, y) or (x, y, confidence)}
        drop: Landmark names to leave out entirely
    """
    hx, hy = hand
    positions = dict(BASE_BODY)
    positions[LandmarkName.LEFT_WRIST] = (hx - 5.0, hy)
    positions[LandmarkName.RIGHT_WRIST] = (hx + 5.0, hy)

    landmarks = []
    for name, (x, y) in positions.items():
        conf = confidence
        if overrides and name in overrides:
            override = overrides[name]
            x, y = override[0], override[1]
            if len(override) > 2:
                conf = override[2]
        if name in drop:
            continue
        landmarks.append(Landmark(x=x, y=y, confidence=conf, name=name))

    return PoseFrame.from_landmarks(landmarks, timestamp_ms=timestamp_ms, frame_number=frame_number)


def swing_hand_ys():
    """
    Hand heights for one full swing at 30fps.

    Address hold, takeaway, transition, downswing, follow-through, a held
    finish above the reset line, then hands dropped back to address height.
    """
    ys = [350.0] * 60                                        # IDLE -> Address
    ys += [350.0 - 5.0 * i for i in range(1, 21)]            # Backswing, 150 px/s up
    ys += [250.0 + i / 3.0 for i in range(1, 4)]             # Top
    ys += [251.0 + 10.0 * i for i in range(1, 5)]            # Downswing, 300 px/s down
    ys += [291.0 - 5.0 * i / 3.0 for i in range(1, 7)]       # Impact, FollowThrough, Finish
    ys += [281.0] * 20                                       # Finish held
    ys += [400.0] * 10                                       # Back to Address
    return ys


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def frame_ms():
    return FRAME_MS


@pytest.fixture
def swing_frames():
    return [
        build_frame(hand=(310.0, y), timestamp_ms=i * FRAME_MS, frame_number=i)
        for i, y in enumerate(swing_hand_ys())
    ]


@pytest.fixture
def hand_ys():
    return swing_hand_ys()


@pytest.fixture
def to_json():
    """PoseFrame -> request payload dict."""

    def convert(frame):
        return {
            "landmarks": [
                {"x": lm.x, "y": lm.y, "confidence": lm.confidence, "name": lm.name.value}
                for lm in frame.landmarks.values()
            ],
            "timestamp_ms": frame.timestamp_ms,
            "frame_number": frame.frame_number,
        }

    return convert
