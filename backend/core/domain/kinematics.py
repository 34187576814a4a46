"""
Kinematics Domain Models

Data structures for the per-frame kinematic state produced by the
KinematicsEngine: joint angles, segment lengths, the reconstructed arm
chain and the current swing phase.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from .pose import LandmarkName


class Point(NamedTuple):
    """A 2D point in pixel coordinates."""
    x: float
    y: float


class SwingPhase(str, Enum):
    """
    Phases of a golf swing, detected from vertical hand velocity.

    - IDLE: Nobody set up yet, or body not visible
    - ADDRESS: Setup position, hands still
    - BACKSWING: Hands rising
    - TOP: Hands reverse at the top of the swing
    - DOWNSWING: Fast downward acceleration
    - IMPACT: Hands decelerate near the ball (one frame)
    - FOLLOW_THROUGH: After impact, hands rising again
    - FINISH: Motion settled at full extension
    """
    IDLE = "IDLE"
    ADDRESS = "Address"
    BACKSWING = "Backswing"
    TOP = "Top"
    DOWNSWING = "Downswing"
    IMPACT = "Impact"
    FOLLOW_THROUGH = "FollowThrough"
    FINISH = "Finish"

    @property
    def is_active(self) -> bool:
        """True once a swing is under way (any phase past Address)."""
        return self not in (SwingPhase.IDLE, SwingPhase.ADDRESS)


class JointName(str, Enum):
    """The six tracked joints."""
    RIGHT_ELBOW = "Right Elbow"
    LEFT_ELBOW = "Left Elbow"
    RIGHT_KNEE = "Right Knee"
    LEFT_KNEE = "Left Knee"
    RIGHT_SHOULDER = "Right Shoulder"
    LEFT_SHOULDER = "Left Shoulder"


# (proximal, hinge, distal) - the angle is measured at the hinge.
JOINT_DEFINITIONS: dict[JointName, tuple[LandmarkName, LandmarkName, LandmarkName]] = {
    JointName.RIGHT_ELBOW: (
        LandmarkName.RIGHT_SHOULDER, LandmarkName.RIGHT_ELBOW, LandmarkName.RIGHT_WRIST,
    ),
    JointName.LEFT_ELBOW: (
        LandmarkName.LEFT_SHOULDER, LandmarkName.LEFT_ELBOW, LandmarkName.LEFT_WRIST,
    ),
    JointName.RIGHT_KNEE: (
        LandmarkName.RIGHT_HIP, LandmarkName.RIGHT_KNEE, LandmarkName.RIGHT_ANKLE,
    ),
    JointName.LEFT_KNEE: (
        LandmarkName.LEFT_HIP, LandmarkName.LEFT_KNEE, LandmarkName.LEFT_ANKLE,
    ),
    JointName.RIGHT_SHOULDER: (
        LandmarkName.RIGHT_HIP, LandmarkName.RIGHT_SHOULDER, LandmarkName.RIGHT_ELBOW,
    ),
    JointName.LEFT_SHOULDER: (
        LandmarkName.LEFT_HIP, LandmarkName.LEFT_SHOULDER, LandmarkName.LEFT_ELBOW,
    ),
}


@dataclass(frozen=True)
class JointAngleSample:
    """
    One joint's smoothed angle for one frame.

    Attributes:
        name: Which joint
        angle_deg: Smoothed interior angle (0-180)
        angular_velocity_deg_per_s: Change of the smoothed angle per second
        min_deg: Smallest angle in the trailing history window
        max_deg: Largest angle in the trailing history window
    """
    name: JointName
    angle_deg: float
    angular_velocity_deg_per_s: float
    min_deg: float
    max_deg: float


@dataclass(frozen=True)
class SegmentLengths:
    """Estimated limb segment lengths in pixels (0 when not measurable)."""
    upper_arm: float = 0.0  # shoulder -> elbow
    forearm: float = 0.0    # elbow -> wrist
    thigh: float = 0.0      # hip -> knee
    shin: float = 0.0       # knee -> ankle


@dataclass(frozen=True)
class IKResult:
    """
    Reconstructed right-arm chain.

    Angles are in degrees: shoulder_angle_deg is the absolute bearing of the
    reconstructed upper arm, elbow_angle_deg the interior angle at the elbow.
    """
    target: Point
    shoulder: Point
    elbow: Point
    wrist: Point
    shoulder_angle_deg: float
    elbow_angle_deg: float


@dataclass(frozen=True)
class ImplementEstimate:
    """Club estimate extended from both forearms."""
    grip: Point
    head: Point
    angle_deg: float


@dataclass
class KinematicsState:
    """
    Snapshot of everything the engine knows after one frame.

    Renderers must tolerate an empty joints map and a missing IK result.
    body_visible is False only when the visibility gate rejected the frame.
    """
    timestamp_ms: float
    phase: SwingPhase = SwingPhase.IDLE
    joints: dict[JointName, JointAngleSample] = field(default_factory=dict)
    segment_lengths: SegmentLengths = field(default_factory=SegmentLengths)
    ik: Optional[IKResult] = None
    history: dict[JointName, list[float]] = field(default_factory=dict)
    hand_path: list[Point] = field(default_factory=list)
    hand_position: Optional[Point] = None
    implement: Optional[ImplementEstimate] = None
    body_visible: bool = True

    @property
    def is_empty(self) -> bool:
        """True when no joint could be measured this frame."""
        return not self.joints
