"""
Kinematics Engine

Turns one PoseFrame + timestamp into one KinematicsState, keeping the
smoothing, persistence and phase state that has to survive between frames.

Per frame:
1. Body-visibility gate (skipped while a swing is in progress)
2. Hand position (midpoint of both wrists) and hand trail
3. Joint angles with outlier clamping, phase-adaptive EMA and persistence
4. Segment lengths
5. Right-arm IK reconstruction against the measured wrist
6. Phase state machine update

One engine per camera stream; process() must not be called concurrently.
"""

import logging
import math
from collections import deque
from typing import Deque, Optional

from ..domain.kinematics import (
    IKResult,
    JOINT_DEFINITIONS,
    JointAngleSample,
    JointName,
    KinematicsState,
    Point,
    SegmentLengths,
    SwingPhase,
)
from ..domain.pose import LandmarkName, PoseFrame
from .geometry import angle_at, distance, ema, midpoint
from .ik_solver import compute_chain, segment_bearing, solve_two_bone
from .phase_detector import SwingPhaseDetector

logger = logging.getLogger(__name__)


class KinematicsEngine:
    """
    Stateful per-frame kinematics processor.

    Usage:
        engine = KinematicsEngine()

        for frame in frames:
            state = engine.process(frame, frame.timestamp_ms)
            print(state.phase, state.joints.get(JointName.RIGHT_ELBOW))

        # Between sessions
        engine.reset()
    """

    # -------------------------------------------------------------------------
    # Tuning constants (fixed by design, not runtime configurable)
    # -------------------------------------------------------------------------

    BODY_MIN_CONFIDENCE = 0.2     # Low on purpose: fast motion blurs the torso
    MIN_CONFIDENCE = 0.3          # Joints, hands, segments, IK
    HISTORY_SIZE = 120            # Samples kept per joint
    HAND_PATH_SIZE = 50           # Hand trail points

    FAST_PHASES = (SwingPhase.DOWNSWING, SwingPhase.IMPACT)
    STILL_PHASES = (SwingPhase.ADDRESS, SwingPhase.FINISH)

    ALPHA_STILL = 0.2             # Stable readings while holding a pose
    ALPHA_FAST = 0.7              # Responsive readings through the ball
    ALPHA_DEFAULT = 0.5

    MAX_DELTA_FAST = 60.0         # deg/frame
    MAX_DELTA_DEFAULT = 20.0      # deg/frame

    PERSISTENCE_MS = 500.0
    PERSISTENCE_FINISH_MS = 1000.0  # Occlusion at full extension is common

    SEGMENTS = {
        "upper_arm": (
            (LandmarkName.LEFT_SHOULDER, LandmarkName.LEFT_ELBOW),
            (LandmarkName.RIGHT_SHOULDER, LandmarkName.RIGHT_ELBOW),
        ),
        "forearm": (
            (LandmarkName.LEFT_ELBOW, LandmarkName.LEFT_WRIST),
            (LandmarkName.RIGHT_ELBOW, LandmarkName.RIGHT_WRIST),
        ),
        "thigh": (
            (LandmarkName.LEFT_HIP, LandmarkName.LEFT_KNEE),
            (LandmarkName.RIGHT_HIP, LandmarkName.RIGHT_KNEE),
        ),
        "shin": (
            (LandmarkName.LEFT_KNEE, LandmarkName.LEFT_ANKLE),
            (LandmarkName.RIGHT_KNEE, LandmarkName.RIGHT_ANKLE),
        ),
    }

    def __init__(self) -> None:
        self._phase_detector = SwingPhaseDetector()
        self._history: dict[JointName, Deque[float]] = {}
        self._last_angles: dict[JointName, float] = {}
        self._last_valid: dict[JointName, tuple[JointAngleSample, float]] = {}
        self._hand_path: Deque[Point] = deque(maxlen=self.HAND_PATH_SIZE)
        self._last_timestamp: Optional[float] = None

    @property
    def phase(self) -> SwingPhase:
        """Current swing phase."""
        return self._phase_detector.phase

    @property
    def history(self) -> dict[JointName, list[float]]:
        """Copy of the per-joint angle history (oldest first)."""
        return {name: list(values) for name, values in self._history.items()}

    def reset(self) -> None:
        """Forget all smoothing, persistence and phase state."""
        self._phase_detector.reset()
        self._history.clear()
        self._last_angles.clear()
        self._last_valid.clear()
        self._hand_path.clear()
        self._last_timestamp = None

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def process(self, frame: PoseFrame, timestamp_ms: float) -> KinematicsState:
        """
        Process one pose frame.

        Args:
            frame: Landmarks for this instant (absent landmarks count as confidence 0)
            timestamp_ms: Monotonic timestamp in milliseconds

        Returns:
            KinematicsState snapshot. If the body is not visible outside an
            active swing, the phase is forced to IDLE and the state is empty.
        """
        phase = self._phase_detector.phase

        if not self._is_body_visible(frame) and not phase.is_active:
            logger.debug(f"Body not visible at t={timestamp_ms}ms, forcing IDLE")
            self._phase_detector.force_idle()
            return KinematicsState(
                timestamp_ms=timestamp_ms,
                phase=SwingPhase.IDLE,
                history=self.history,
                body_visible=False,
            )

        dt = 0.0
        if self._last_timestamp is not None:
            dt = (timestamp_ms - self._last_timestamp) / 1000
        self._last_timestamp = timestamp_ms

        hand_position = self._update_hand_path(frame, phase)

        joints: dict[JointName, JointAngleSample] = {}
        for name in JOINT_DEFINITIONS:
            sample = self._measure_joint(frame, name, phase, timestamp_ms, dt)
            if sample is not None:
                joints[name] = sample

        segment_lengths = self._calculate_segment_lengths(frame)
        ik = self._calculate_ik(frame)

        new_phase = self._phase_detector.update(hand_position, dt)

        return KinematicsState(
            timestamp_ms=timestamp_ms,
            phase=new_phase,
            joints=joints,
            segment_lengths=segment_lengths,
            ik=ik,
            history=self.history,
            hand_path=list(self._hand_path),
            hand_position=hand_position,
        )

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _is_body_visible(self, frame: PoseFrame) -> bool:
        """At least one full side (shoulder and hip) must be tracked."""
        threshold = self.BODY_MIN_CONFIDENCE
        for shoulder, hip in (
            (LandmarkName.LEFT_SHOULDER, LandmarkName.LEFT_HIP),
            (LandmarkName.RIGHT_SHOULDER, LandmarkName.RIGHT_HIP),
        ):
            if (frame.confidence_of(shoulder) >= threshold
                    and frame.confidence_of(hip) >= threshold):
                return True
        return False

    def _update_hand_path(self, frame: PoseFrame, phase: SwingPhase) -> Optional[Point]:
        left = frame.visible(LandmarkName.LEFT_WRIST, self.MIN_CONFIDENCE)
        right = frame.visible(LandmarkName.RIGHT_WRIST, self.MIN_CONFIDENCE)
        if left is None or right is None:
            return None

        hand = midpoint(left, right)

        # No trail while standing at address
        if phase == SwingPhase.ADDRESS:
            self._hand_path.clear()
        else:
            self._hand_path.append(hand)
        return hand

    def _measure_joint(
        self,
        frame: PoseFrame,
        name: JointName,
        phase: SwingPhase,
        timestamp_ms: float,
        dt: float,
    ) -> Optional[JointAngleSample]:
        """Smoothed sample for one joint, a recent stale one, or None."""
        points = [frame.visible(lm, self.MIN_CONFIDENCE) for lm in JOINT_DEFINITIONS[name]]

        if any(p is None for p in points):
            return self._persisted_sample(name, phase, timestamp_ms)

        a, b, c = points
        raw_angle = angle_at(a, b, c)
        if not math.isfinite(raw_angle):
            return self._persisted_sample(name, phase, timestamp_ms)
        previous = self._last_angles.get(name)

        # Single-frame flips (limb misassignment) are capped, not discarded
        filtered = raw_angle
        if previous is not None:
            delta = raw_angle - previous
            max_delta = self.MAX_DELTA_FAST if phase in self.FAST_PHASES else self.MAX_DELTA_DEFAULT
            if abs(delta) > max_delta:
                filtered = previous + math.copysign(max_delta, delta)

        angle = ema(filtered, previous, self._smoothing_alpha(phase))
        angle = min(max(angle, 0.0), 180.0)
        self._last_angles[name] = angle

        history = self._history.setdefault(name, deque(maxlen=self.HISTORY_SIZE))
        history.append(angle)

        velocity = 0.0
        if previous is not None and dt > 0:
            velocity = (angle - previous) / dt

        sample = JointAngleSample(
            name=name,
            angle_deg=angle,
            angular_velocity_deg_per_s=velocity,
            min_deg=min(history),
            max_deg=max(history),
        )
        self._last_valid[name] = (sample, timestamp_ms)
        return sample

    def _persisted_sample(
        self,
        name: JointName,
        phase: SwingPhase,
        timestamp_ms: float,
    ) -> Optional[JointAngleSample]:
        last = self._last_valid.get(name)
        if last is None:
            return None

        sample, measured_at = last
        window = self.PERSISTENCE_FINISH_MS if phase == SwingPhase.FINISH else self.PERSISTENCE_MS
        if timestamp_ms - measured_at < window:
            return sample
        return None

    def _smoothing_alpha(self, phase: SwingPhase) -> float:
        if phase in self.STILL_PHASES:
            return self.ALPHA_STILL
        if phase in self.FAST_PHASES:
            return self.ALPHA_FAST
        return self.ALPHA_DEFAULT

    def _calculate_segment_lengths(self, frame: PoseFrame) -> SegmentLengths:
        """Average of both sides; 0 unless both sides are tracked."""
        lengths = {}
        for segment, sides in self.SEGMENTS.items():
            measured = []
            for start_name, end_name in sides:
                start = frame.visible(start_name, self.MIN_CONFIDENCE)
                end = frame.visible(end_name, self.MIN_CONFIDENCE)
                if start is not None and end is not None:
                    measured.append(distance(start, end))
            lengths[segment] = sum(measured) / 2 if len(measured) == 2 else 0.0
        return SegmentLengths(**lengths)

    def _calculate_ik(self, frame: PoseFrame) -> Optional[IKResult]:
        """
        Two-bone IK for the right arm (shoulder -> elbow -> wrist).

        The target is the measured wrist itself, so this is a consistency
        pass: the reconstruction should land back on the measured joints.
        """
        shoulder = frame.visible(LandmarkName.RIGHT_SHOULDER, self.MIN_CONFIDENCE)
        elbow = frame.visible(LandmarkName.RIGHT_ELBOW, self.MIN_CONFIDENCE)
        wrist = frame.visible(LandmarkName.RIGHT_WRIST, self.MIN_CONFIDENCE)
        if shoulder is None or elbow is None or wrist is None:
            return None

        upper_arm = distance(shoulder, elbow)
        forearm = distance(elbow, wrist)
        angles = solve_two_bone(upper_arm, forearm, distance(shoulder, wrist))
        if angles is None:
            return None

        # Bend toward the side the measured elbow is on
        cross = ((wrist.x - shoulder.x) * (elbow.y - shoulder.y)
                 - (wrist.y - shoulder.y) * (elbow.x - shoulder.x))
        bend_direction = 1 if cross <= 0 else -1

        chain = compute_chain(shoulder, wrist, upper_arm, forearm, bend_direction)

        return IKResult(
            target=Point(wrist.x, wrist.y),
            shoulder=Point(shoulder.x, shoulder.y),
            elbow=chain.joint,
            wrist=chain.end,
            shoulder_angle_deg=math.degrees(segment_bearing(shoulder, chain.joint)),
            elbow_angle_deg=math.degrees(angles.beta),
        )
