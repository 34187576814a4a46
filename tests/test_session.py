"""Tests for the engine + tracker wiring."""

import pytest

from core.domain import LandmarkName, SwingPhase
from core.services.session import KinematicsSession


def test_scripted_swing_produces_one_record(swing_frames, frame_ms):
    session = KinematicsSession()

    results = session.process_all(swing_frames)
    completed = [r.completed_swing for r in results if r.completed_swing]

    assert len(completed) == 1
    record = completed[0]
    assert record.id == 1
    assert record.start_time_ms == pytest.approx(60 * frame_ms)
    assert record.end_time_ms == pytest.approx(103 * frame_ms)
    assert len(record.hand_path) == 44
    assert session.swings == [record]
    assert session.frames_processed == len(swing_frames)
    assert results[-1].state.phase == SwingPhase.ADDRESS


def test_club_estimate_attached(make_frame):
    result = KinematicsSession().process(make_frame(), 0.0)

    assert result.state.implement is not None
    assert result.completed_swing is None


def test_no_club_when_body_not_visible(make_frame):
    result = KinematicsSession().process(make_frame(confidence=0.1), 0.0)

    assert result.state.is_empty
    assert result.state.implement is None


def test_reset_keeps_completed_swings(swing_frames):
    session = KinematicsSession()
    session.process_all(swing_frames)

    session.reset()

    assert session.engine.phase == SwingPhase.IDLE
    assert session.frames_processed == 0
    assert len(session.swings) == 1
    assert session.export_history_csv() == ""


def test_export_history_csv(swing_frames):
    session = KinematicsSession()
    session.process_all(swing_frames[:3])

    lines = session.export_history_csv().splitlines()

    assert lines[0].startswith("Index,Right Elbow,")
    assert len(lines) == 4


def test_club_estimated_when_no_joint_is_measurable(make_frame):
    # Shoulders and knees too weak for any joint, body gate still passes
    weak = {
        LandmarkName.LEFT_SHOULDER: (280.0, 200.0, 0.25),
        LandmarkName.RIGHT_SHOULDER: (340.0, 200.0, 0.25),
        LandmarkName.LEFT_KNEE: (285.0, 420.0, 0.25),
        LandmarkName.RIGHT_KNEE: (335.0, 420.0, 0.25),
    }

    state = KinematicsSession().process(make_frame(overrides=weak), 0.0).state

    assert state.is_empty
    assert state.body_visible
    assert state.implement is not None
