"""
Swing Segmentation Tracker

Watches the phase stream and cuts it into individual swings:
- start: Address -> Backswing
- end: Finish held for FINISH_STABLE_FRAMES consecutive frames
- abort: back to IDLE/Address straight from Downswing or FollowThrough
"""

import logging
from typing import List, Optional

from ..domain.kinematics import Point, SwingPhase
from ..domain.swing import SwingRecord

logger = logging.getLogger(__name__)


class SwingTracker:
    """
    Emits a SwingRecord for every completed swing.

    Usage:
        tracker = SwingTracker()

        for state in states:
            record = tracker.process_phase(state.phase, state.hand_position, state.timestamp_ms)
            if record:
                print(f"Swing {record.id}: {record.duration_s:.2f}s")
    """

    FINISH_STABLE_FRAMES = 15  # ~0.5s at 30fps

    ABORT_FROM = (SwingPhase.DOWNSWING, SwingPhase.FOLLOW_THROUGH)
    ABORT_TO = (SwingPhase.IDLE, SwingPhase.ADDRESS)

    def __init__(self) -> None:
        self._swings: List[SwingRecord] = []
        self._swing_id = 0
        self._is_swinging = False
        self._start_time_ms = 0.0
        self._hand_path: List[Point] = []
        self._last_phase = SwingPhase.IDLE
        self._finish_frames = 0

    # -------------------------------------------------------------------------
    # Phase processing
    # -------------------------------------------------------------------------

    def process_phase(
        self,
        phase: SwingPhase,
        hand_position: Optional[Point],
        timestamp_ms: float,
    ) -> Optional[SwingRecord]:
        """
        Feed one frame's phase.

        Args:
            phase: Phase reported by the engine for this frame
            hand_position: Hand midpoint, or None if hands not tracked
            timestamp_ms: Frame timestamp in milliseconds

        Returns:
            The SwingRecord completed on this frame, otherwise None
        """
        completed: Optional[SwingRecord] = None

        if (not self._is_swinging
                and self._last_phase == SwingPhase.ADDRESS
                and phase == SwingPhase.BACKSWING):
            self._swing_id += 1
            self._is_swinging = True
            self._start_time_ms = timestamp_ms
            self._hand_path = []
            logger.info(f"Swing {self._swing_id} started at t={timestamp_ms}ms")

        if self._is_swinging and hand_position is not None:
            self._hand_path.append(hand_position)

        if self._is_swinging and phase == SwingPhase.FINISH:
            self._finish_frames += 1
            if self._finish_frames >= self.FINISH_STABLE_FRAMES:
                completed = self._complete(timestamp_ms)
        else:
            # No partial credit for an interrupted finish
            self._finish_frames = 0

        if (self._is_swinging
                and phase in self.ABORT_TO
                and self._last_phase in self.ABORT_FROM):
            logger.warning(
                f"Swing {self._swing_id} aborted ({self._last_phase.value} -> {phase.value})"
            )
            self._discard_current()

        self._last_phase = phase
        return completed

    def _complete(self, timestamp_ms: float) -> SwingRecord:
        record = SwingRecord(
            id=self._swing_id,
            start_time_ms=self._start_time_ms,
            end_time_ms=timestamp_ms,
            duration_s=(timestamp_ms - self._start_time_ms) / 1000,
            hand_path=tuple(self._hand_path),
            peak_phase=SwingPhase.FINISH,
        )
        self._swings.append(record)
        logger.info(f"Swing {record.id} completed: {record.duration_s:.2f}s")
        self._discard_current()
        return record

    def _discard_current(self) -> None:
        self._is_swinging = False
        self._finish_frames = 0
        self._hand_path = []

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def history(self) -> List[SwingRecord]:
        """Completed swings, oldest first (a copy)."""
        return list(self._swings)

    def get_swing(self, swing_id: int) -> Optional[SwingRecord]:
        """Look up a completed swing by id."""
        return next((s for s in self._swings if s.id == swing_id), None)

    @property
    def current_swing_id(self) -> int:
        """Id of the swing in progress, or 0."""
        return self._swing_id if self._is_swinging else 0

    @property
    def is_swinging(self) -> bool:
        return self._is_swinging

    def reset(self) -> None:
        """Abort any swing in progress and forget the last phase; history is kept."""
        self._discard_current()
        self._last_phase = SwingPhase.IDLE

    def clear_history(self) -> None:
        """
        Forget completed swings and restart ids at 1.

        A swing in progress is aborted too, so no record can carry timing
        captured before the clear.
        """
        if self._is_swinging:
            logger.info(f"Swing {self._swing_id} discarded by history clear")
        self._swings = []
        self._swing_id = 0
        self._discard_current()
