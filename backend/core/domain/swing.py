"""
Swing Record Domain Model

A completed swing, segmented from the phase stream.
"""

from dataclasses import dataclass

from .kinematics import Point, SwingPhase


@dataclass(frozen=True)
class SwingRecord:
    """
    One completed swing. Immutable once emitted.

    Attributes:
        id: Sequential swing number within the tracker (starts at 1)
        start_time_ms: Timestamp of the Address -> Backswing transition
        end_time_ms: Timestamp at which Finish was held long enough
        duration_s: (end_time_ms - start_time_ms) / 1000
        hand_path: Hand positions captured while swinging
        peak_phase: Last phase reached (always Finish for completed swings)
    """
    id: int
    start_time_ms: float
    end_time_ms: float
    duration_s: float
    hand_path: tuple[Point, ...]
    peak_phase: SwingPhase = SwingPhase.FINISH
