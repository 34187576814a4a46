"""Tests for the per-frame kinematics engine."""

import math

import pytest

from core.domain import JointName, LandmarkName, Point, SwingPhase
from core.services.geometry import angle_at
from core.services.kinematics_engine import KinematicsEngine

RIGHT_ARM_90 = {
    LandmarkName.RIGHT_SHOULDER: (350.0, 200.0),
    LandmarkName.RIGHT_ELBOW: (350.0, 260.0),
    LandmarkName.RIGHT_WRIST: (410.0, 260.0),
}


def right_arm_at(angle_deg):
    """Shoulder straight above the elbow, wrist rotated to the given elbow angle."""
    bearing = math.radians(-90.0 + angle_deg)
    return {
        LandmarkName.RIGHT_SHOULDER: (350.0, 200.0),
        LandmarkName.RIGHT_ELBOW: (350.0, 260.0),
        LandmarkName.RIGHT_WRIST: (350.0 + 60 * math.cos(bearing), 260.0 + 60 * math.sin(bearing)),
    }


def test_all_joints_measured(make_frame):
    state = KinematicsEngine().process(make_frame(), 0.0)

    assert set(state.joints) == set(JointName)
    for sample in state.joints.values():
        assert 0.0 <= sample.angle_deg <= 180.0
        assert sample.angular_velocity_deg_per_s == 0.0


def test_first_sample_is_unsmoothed(make_frame):
    state = KinematicsEngine().process(make_frame(overrides=RIGHT_ARM_90), 0.0)

    assert state.joints[JointName.RIGHT_ELBOW].angle_deg == pytest.approx(90.0)


def test_outlier_jump_is_clamped_before_smoothing(make_frame, frame_ms):
    engine = KinematicsEngine()
    engine.process(make_frame(overrides=right_arm_at(90.0)), 0.0)

    state = engine.process(make_frame(overrides=right_arm_at(170.0)), frame_ms)

    # 90 -> 170 capped to 110, then EMA(0.5) with 90
    sample = state.joints[JointName.RIGHT_ELBOW]
    assert state.phase == SwingPhase.IDLE
    assert sample.angle_deg == pytest.approx(100.0)
    assert sample.angular_velocity_deg_per_s == pytest.approx(10.0 / (frame_ms / 1000))
    assert sample.min_deg == pytest.approx(90.0)
    assert sample.max_deg == pytest.approx(100.0)


def test_fast_phase_allows_larger_jump(make_frame, frame_ms):
    engine = KinematicsEngine()
    engine.process(make_frame(overrides=right_arm_at(90.0)), 0.0)
    engine._phase_detector.phase = SwingPhase.DOWNSWING

    state = engine.process(make_frame(overrides=right_arm_at(170.0)), frame_ms)

    # 90 -> 150 (60 deg cap), then EMA(0.7): 0.7 * 150 + 0.3 * 90
    assert state.joints[JointName.RIGHT_ELBOW].angle_deg == pytest.approx(132.0)


def test_persistence_window(make_frame):
    engine = KinematicsEngine()
    first = engine.process(make_frame(), 1000.0)
    measured = first.joints[JointName.RIGHT_ELBOW]

    hidden = {LandmarkName.RIGHT_WRIST: (315.0, 350.0, 0.0)}
    held = engine.process(make_frame(overrides=hidden), 1499.0)
    assert held.joints[JointName.RIGHT_ELBOW] == measured

    gone = engine.process(make_frame(drop=(LandmarkName.RIGHT_WRIST,)), 1501.0)
    assert JointName.RIGHT_ELBOW not in gone.joints
    assert JointName.LEFT_ELBOW in gone.joints


def test_persistence_is_longer_in_finish(make_frame):
    engine = KinematicsEngine()
    engine.process(make_frame(), 0.0)
    engine._phase_detector.phase = SwingPhase.FINISH

    state = engine.process(make_frame(drop=(LandmarkName.RIGHT_WRIST,)), 800.0)

    assert JointName.RIGHT_ELBOW in state.joints


def test_invisible_body_forces_idle(make_frame):
    engine = KinematicsEngine()
    for i in range(40):
        engine.process(make_frame(), i * 33.0)
    assert engine.phase == SwingPhase.ADDRESS

    low = {
        LandmarkName.LEFT_HIP: (290.0, 330.0, 0.1),
        LandmarkName.RIGHT_HIP: (330.0, 330.0, 0.1),
    }
    state = engine.process(make_frame(overrides=low), 40 * 33.0)

    assert state.phase == SwingPhase.IDLE
    assert state.is_empty
    assert state.ik is None
    assert state.hand_path == []
    # History survives the gate
    assert len(state.history[JointName.RIGHT_ELBOW]) == 40


def test_body_gate_threshold_is_inclusive(make_frame):
    edge = {
        LandmarkName.LEFT_SHOULDER: (280.0, 200.0, 0.2),
        LandmarkName.LEFT_HIP: (290.0, 330.0, 0.2),
        LandmarkName.RIGHT_SHOULDER: (340.0, 200.0, 0.0),
    }
    state = KinematicsEngine().process(make_frame(overrides=edge), 0.0)

    assert not state.is_empty


def test_body_gate_is_skipped_mid_swing(make_frame):
    engine = KinematicsEngine()
    engine._phase_detector.phase = SwingPhase.DOWNSWING

    blurred = {
        LandmarkName.LEFT_HIP: (290.0, 330.0, 0.05),
        LandmarkName.RIGHT_HIP: (330.0, 330.0, 0.05),
    }
    state = engine.process(make_frame(overrides=blurred), 0.0)

    assert state.phase == SwingPhase.DOWNSWING
    assert JointName.RIGHT_ELBOW in state.joints


def test_segment_lengths_need_both_sides(make_frame):
    engine = KinematicsEngine()

    state = engine.process(make_frame(), 0.0)
    assert state.segment_lengths.thigh == pytest.approx(math.hypot(5, 90))
    assert state.segment_lengths.shin == pytest.approx(90.0)

    state = engine.process(make_frame(drop=(LandmarkName.LEFT_ANKLE,)), 33.0)
    assert state.segment_lengths.shin == 0.0
    assert state.segment_lengths.thigh > 0.0


def test_ik_reconstructs_measured_arm(make_frame):
    frame = make_frame()
    shoulder = frame.get(LandmarkName.RIGHT_SHOULDER)
    elbow = frame.get(LandmarkName.RIGHT_ELBOW)
    wrist = frame.get(LandmarkName.RIGHT_WRIST)

    ik = KinematicsEngine().process(frame, 0.0).ik

    assert ik is not None
    assert ik.target == Point(wrist.x, wrist.y)
    assert ik.elbow.x == pytest.approx(elbow.x, abs=1e-6)
    assert ik.elbow.y == pytest.approx(elbow.y, abs=1e-6)
    assert ik.wrist.x == pytest.approx(wrist.x, abs=1e-6)
    assert ik.wrist.y == pytest.approx(wrist.y, abs=1e-6)
    assert ik.elbow_angle_deg == pytest.approx(angle_at(shoulder, elbow, wrist))


def test_ik_needs_confident_arm(make_frame):
    weak = {LandmarkName.RIGHT_ELBOW: (350.0, 260.0, 0.3)}

    assert KinematicsEngine().process(make_frame(overrides=weak), 0.0).ik is None


def test_hand_path_cleared_at_address(make_frame):
    engine = KinematicsEngine()
    for i in range(40):
        state = engine.process(make_frame(), i * 33.0)

    assert state.phase == SwingPhase.ADDRESS
    assert state.hand_path == []
    assert state.hand_position == Point(310.0, 350.0)


def test_history_and_hand_path_are_bounded(make_frame):
    engine = KinematicsEngine()
    for i in range(130):
        # Jittering hands keep the detector in IDLE
        y = 350.0 if i % 2 else 330.0
        state = engine.process(make_frame(hand=(310.0, y)), i * 33.0)

    assert state.phase == SwingPhase.IDLE
    assert all(len(values) == 120 for values in state.history.values())
    assert len(state.hand_path) == 50


def test_state_history_is_a_snapshot(make_frame):
    engine = KinematicsEngine()
    state = engine.process(make_frame(), 0.0)
    engine.process(make_frame(), 33.0)

    assert len(state.history[JointName.RIGHT_ELBOW]) == 1


def test_deterministic(swing_frames):
    first, second = KinematicsEngine(), KinematicsEngine()

    for frame in swing_frames:
        assert first.process(frame, frame.timestamp_ms) == second.process(frame, frame.timestamp_ms)


def test_reset_clears_state(swing_frames):
    engine = KinematicsEngine()
    for frame in swing_frames[:70]:
        engine.process(frame, frame.timestamp_ms)
    assert engine.phase == SwingPhase.BACKSWING

    engine.reset()

    assert engine.phase == SwingPhase.IDLE
    assert engine.history == {}
    state = engine.process(swing_frames[0], 0.0)
    assert len(state.history[JointName.RIGHT_ELBOW]) == 1


def test_non_finite_coordinate_does_not_poison_joint(make_frame, frame_ms):
    engine = KinematicsEngine()
    engine.process(make_frame(), 0.0)

    broken = {LandmarkName.RIGHT_WRIST: (float("nan"), 350.0, 0.9)}
    state = engine.process(make_frame(overrides=broken), frame_ms)
    held = state.joints[JointName.RIGHT_ELBOW].angle_deg
    assert math.isfinite(held)

    for i in range(2, 6):
        state = engine.process(make_frame(), i * frame_ms)
        for sample in state.joints.values():
            assert math.isfinite(sample.angle_deg)
            assert 0.0 <= sample.angle_deg <= 180.0
        assert all(math.isfinite(v) for v in state.history[JointName.RIGHT_ELBOW])


def test_infinite_coordinate_counts_as_invisible(make_frame):
    broken = {LandmarkName.RIGHT_ELBOW: (float("inf"), 260.0, 0.9)}

    state = KinematicsEngine().process(make_frame(overrides=broken), 0.0)

    assert JointName.RIGHT_ELBOW not in state.joints
    assert state.ik is None
    assert state.segment_lengths.upper_arm == 0.0
