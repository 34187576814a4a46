"""
Swing Phase Detector

State machine that classifies the swing phase from the vertical velocity of
the hands. Image y grows downward, so negative velocity means the hands are
moving up.

    IDLE -> Address -> Backswing -> Top -> Downswing -> Impact
         -> FollowThrough -> Finish -> Address -> ...
"""

import logging
from collections import deque
from typing import Deque, Optional

from ..domain.kinematics import Point, SwingPhase

logger = logging.getLogger(__name__)


class SwingPhaseDetector:
    """
    Tracks the current swing phase across frames.

    Exactly one phase is active at a time. Only update(), force_idle() and
    reset() change it.
    """

    VELOCITY_THRESHOLD = 80.0     # px/s
    IDLE_STABLE_FRAMES = 30       # ~1s at 30fps before Address
    ADDRESS_STABLE_FRAMES = 15    # ~0.5s held stance before a swing may start
    BACKSWING_TRIGGER = 1.2       # x threshold, upward
    DOWNSWING_TRIGGER = 2.0       # x threshold, downward
    FINISH_RESET_Y = 300.0        # hands below this (px) count as "low"
    HAND_BUFFER_SIZE = 10

    def __init__(self) -> None:
        self.phase: SwingPhase = SwingPhase.IDLE
        self.stability_frames = 0
        self.last_velocity_y = 0.0
        self._hand_y: Deque[float] = deque(maxlen=self.HAND_BUFFER_SIZE)

    def reset(self) -> None:
        """Back to IDLE with no motion memory."""
        self.phase = SwingPhase.IDLE
        self.stability_frames = 0
        self.last_velocity_y = 0.0
        self._hand_y.clear()

    def force_idle(self) -> None:
        """Body lost outside an active swing: drop back to IDLE."""
        if self.phase != SwingPhase.IDLE:
            logger.debug(f"Phase forced {self.phase.value} -> IDLE (body not visible)")
        self.phase = SwingPhase.IDLE
        self.stability_frames = 0

    def update(self, hand_position: Optional[Point], dt: float) -> SwingPhase:
        """
        Advance the state machine by one frame.

        Args:
            hand_position: Midpoint of both wrists, or None if not visible
            dt: Seconds since the previous processed frame

        Returns:
            The phase after this frame
        """
        if hand_position is None or dt <= 0:
            return self.phase

        velocity_y = 0.0
        if self._hand_y:
            velocity_y = (hand_position.y - self._hand_y[-1]) / dt
        self._hand_y.append(hand_position.y)
        self.last_velocity_y = velocity_y

        previous = self.phase
        self.phase = self._next_phase(hand_position, velocity_y)

        if self.phase != previous:
            logger.info(
                f"Swing phase {previous.value} -> {self.phase.value} "
                f"(velY={velocity_y:.1f} px/s)"
            )
        return self.phase

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _next_phase(self, hand: Point, vel_y: float) -> SwingPhase:
        v = self.VELOCITY_THRESHOLD
        phase = self.phase

        if phase == SwingPhase.IDLE:
            # Hands must be very still for about a second
            if abs(vel_y) < v / 3:
                self.stability_frames += 1
            else:
                self.stability_frames = 0

            if self.stability_frames > self.IDLE_STABLE_FRAMES:
                self.stability_frames = 0
                return SwingPhase.ADDRESS
            return phase

        if phase == SwingPhase.ADDRESS:
            # Readiness is judged on the stance held *before* this frame, so a
            # fast takeaway is not cancelled by its own velocity.
            ready = self.stability_frames > self.ADDRESS_STABLE_FRAMES
            if vel_y < -v * self.BACKSWING_TRIGGER and ready:
                return SwingPhase.BACKSWING

            if abs(vel_y) < v:
                self.stability_frames += 1
            else:
                self.stability_frames = 0
            return phase

        if phase == SwingPhase.BACKSWING:
            return SwingPhase.TOP if vel_y >= 0 else phase

        if phase == SwingPhase.TOP:
            return SwingPhase.DOWNSWING if vel_y > v * self.DOWNSWING_TRIGGER else phase

        if phase == SwingPhase.DOWNSWING:
            return SwingPhase.IMPACT if vel_y < 0 else phase

        if phase == SwingPhase.IMPACT:
            return SwingPhase.FOLLOW_THROUGH

        if phase == SwingPhase.FOLLOW_THROUGH:
            return SwingPhase.FINISH if abs(vel_y) < v else phase

        if phase == SwingPhase.FINISH:
            if hand.y > self.FINISH_RESET_Y and abs(vel_y) < v:
                self.stability_frames = 0
                return SwingPhase.ADDRESS
            return phase

        return phase
