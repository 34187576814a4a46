"""
Domain Models

Pure data structures representing pose input and swing kinematics.
No external dependencies - just Python dataclasses and enums.
"""

from .errors import KinematicsError, MissingLandmarkError
from .pose import Landmark, LandmarkName, PoseFrame, REQUIRED_LANDMARKS
from .kinematics import (
    Point,
    SwingPhase,
    JointName,
    JOINT_DEFINITIONS,
    JointAngleSample,
    SegmentLengths,
    IKResult,
    ImplementEstimate,
    KinematicsState,
)
from .swing import SwingRecord

__all__ = [
    "KinematicsError",
    "MissingLandmarkError",
    "Landmark",
    "LandmarkName",
    "PoseFrame",
    "REQUIRED_LANDMARKS",
    "Point",
    "SwingPhase",
    "JointName",
    "JOINT_DEFINITIONS",
    "JointAngleSample",
    "SegmentLengths",
    "IKResult",
    "ImplementEstimate",
    "KinematicsState",
    "SwingRecord",
]
