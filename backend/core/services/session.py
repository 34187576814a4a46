"""
Kinematics Session

What a capture loop does once per frame: run the engine, estimate the club,
and feed the phase stream into the swing tracker. One session per camera.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..domain.kinematics import KinematicsState
from ..domain.pose import PoseFrame
from ..domain.swing import SwingRecord
from .history_export import history_to_csv
from .kinematics_engine import KinematicsEngine
from .limb_direction import LimbDirectionEstimator
from .swing_tracker import SwingTracker


@dataclass
class FrameResult:
    """Output of one session step."""
    state: KinematicsState
    completed_swing: Optional[SwingRecord] = None


class KinematicsSession:
    """
    Engine + swing tracker + club estimator for one stream.

    Usage:
        session = KinematicsSession()
        for frame in frames:
            result = session.process(frame, frame.timestamp_ms)
            if result.completed_swing:
                save(result.completed_swing)
    """

    def __init__(self) -> None:
        self.engine = KinematicsEngine()
        self.tracker = SwingTracker()
        self.limb_estimator = LimbDirectionEstimator()
        self.frames_processed = 0

    def process(self, frame: PoseFrame, timestamp_ms: float) -> FrameResult:
        """Run one frame through the engine and the tracker."""
        state = self.engine.process(frame, timestamp_ms)
        if state.body_visible:
            state.implement = self.limb_estimator.estimate(frame)

        completed = self.tracker.process_phase(state.phase, state.hand_position, timestamp_ms)
        self.frames_processed += 1
        return FrameResult(state=state, completed_swing=completed)

    def process_all(self, frames: List[PoseFrame]) -> List[FrameResult]:
        """Process frames in order using their own timestamps."""
        return [self.process(frame, frame.timestamp_ms) for frame in frames]

    @property
    def swings(self) -> List[SwingRecord]:
        return self.tracker.history

    def reset(self) -> None:
        """Reset tracking state; completed swings are kept."""
        self.engine.reset()
        self.tracker.reset()
        self.frames_processed = 0

    def export_history_csv(self) -> str:
        """Joint angle history as CSV text."""
        return history_to_csv(self.engine.history)
