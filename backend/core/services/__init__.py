"""
Services Layer

Kinematics services: geometry, inverse kinematics, phase detection, the
per-frame engine and swing segmentation.

PoseDetector (MediaPipe/OpenCV) is imported from .pose_detector directly so
the kinematics core can run without the detector stack loaded.
"""

from .geometry import angle_at, distance, ema, midpoint
from .ik_solver import IKChain, TwoBoneAngles, compute_chain, solve_two_bone
from .limb_direction import LimbDirectionEstimator
from .phase_detector import SwingPhaseDetector
from .kinematics_engine import KinematicsEngine
from .swing_tracker import SwingTracker
from .history_export import history_to_csv, history_to_rows
from .session import FrameResult, KinematicsSession

__all__ = [
    "angle_at",
    "distance",
    "ema",
    "midpoint",
    "IKChain",
    "TwoBoneAngles",
    "compute_chain",
    "solve_two_bone",
    "LimbDirectionEstimator",
    "SwingPhaseDetector",
    "KinematicsEngine",
    "SwingTracker",
    "history_to_csv",
    "history_to_rows",
    "FrameResult",
    "KinematicsSession",
]
