"""
Kinematics API Schemas

Pydantic models for the kinematics state and swing records sent to clients.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.domain.kinematics import IKResult, ImplementEstimate, KinematicsState, Point
from core.domain.swing import SwingRecord

from .pose import PoseFrameSchema


class SwingPhaseEnum(str, Enum):
    """Swing phases for API."""
    IDLE = "IDLE"
    ADDRESS = "Address"
    BACKSWING = "Backswing"
    TOP = "Top"
    DOWNSWING = "Downswing"
    IMPACT = "Impact"
    FOLLOW_THROUGH = "FollowThrough"
    FINISH = "Finish"


class PointSchema(BaseModel):
    x: float
    y: float

    @classmethod
    def from_domain(cls, point: Point) -> "PointSchema":
        return cls(x=point.x, y=point.y)


class JointAngleSchema(BaseModel):
    """
    Smoothed angle of one joint.
    """
    name: str = Field(..., description="Joint name (e.g., 'Right Elbow')")
    angle_deg: float = Field(..., ge=0.0, le=180.0, description="Smoothed angle (degrees)")
    angular_velocity_deg_per_s: float = Field(..., description="Angular velocity (deg/s)")
    min_deg: float = Field(..., description="Minimum over the history window")
    max_deg: float = Field(..., description="Maximum over the history window")


class SegmentLengthsSchema(BaseModel):
    """Limb segment lengths in pixels (0 = not measurable)."""
    upper_arm: float = 0.0
    forearm: float = 0.0
    thigh: float = 0.0
    shin: float = 0.0


class IKResultSchema(BaseModel):
    """Reconstructed right-arm chain."""
    target: PointSchema
    shoulder: PointSchema
    elbow: PointSchema
    wrist: PointSchema
    shoulder_angle_deg: float
    elbow_angle_deg: float

    @classmethod
    def from_domain(cls, ik: IKResult) -> "IKResultSchema":
        return cls(
            target=PointSchema.from_domain(ik.target),
            shoulder=PointSchema.from_domain(ik.shoulder),
            elbow=PointSchema.from_domain(ik.elbow),
            wrist=PointSchema.from_domain(ik.wrist),
            shoulder_angle_deg=ik.shoulder_angle_deg,
            elbow_angle_deg=ik.elbow_angle_deg,
        )


class ImplementSchema(BaseModel):
    """Estimated club position."""
    grip: PointSchema
    head: PointSchema
    angle_deg: float

    @classmethod
    def from_domain(cls, implement: ImplementEstimate) -> "ImplementSchema":
        return cls(
            grip=PointSchema.from_domain(implement.grip),
            head=PointSchema.from_domain(implement.head),
            angle_deg=implement.angle_deg,
        )


class KinematicsStateSchema(BaseModel):
    """
    Kinematics snapshot for one frame.

    The joint history is not included per frame; use the export endpoint.
    """
    timestamp_ms: float = Field(..., description="Frame timestamp")
    phase: SwingPhaseEnum = Field(..., description="Current swing phase")
    joints: Dict[str, JointAngleSchema] = Field(default_factory=dict, description="Joint name -> angle")
    segment_lengths: SegmentLengthsSchema = Field(default_factory=SegmentLengthsSchema)
    ik: Optional[IKResultSchema] = Field(None, description="Right-arm IK reconstruction")
    hand_path: List[PointSchema] = Field(default_factory=list, description="Recent hand positions")
    hand_position: Optional[PointSchema] = Field(None, description="Hand midpoint this frame")
    implement: Optional[ImplementSchema] = Field(None, description="Estimated club")

    class Config:
        json_schema_extra = {
            "example": {
                "timestamp_ms": 1533.3,
                "phase": "Backswing",
                "joints": {
                    "Right Elbow": {
                        "name": "Right Elbow",
                        "angle_deg": 142.3,
                        "angular_velocity_deg_per_s": -85.0,
                        "min_deg": 120.1,
                        "max_deg": 171.8
                    }
                },
                "segment_lengths": {"upper_arm": 62.0, "forearm": 55.5, "thigh": 80.2, "shin": 77.0}
            }
        }

    @classmethod
    def from_domain(cls, state: KinematicsState) -> "KinematicsStateSchema":
        return cls(
            timestamp_ms=state.timestamp_ms,
            phase=SwingPhaseEnum(state.phase.value),
            joints={
                name.value: JointAngleSchema(
                    name=sample.name.value,
                    angle_deg=sample.angle_deg,
                    angular_velocity_deg_per_s=sample.angular_velocity_deg_per_s,
                    min_deg=sample.min_deg,
                    max_deg=sample.max_deg,
                )
                for name, sample in state.joints.items()
            },
            segment_lengths=SegmentLengthsSchema(
                upper_arm=state.segment_lengths.upper_arm,
                forearm=state.segment_lengths.forearm,
                thigh=state.segment_lengths.thigh,
                shin=state.segment_lengths.shin,
            ),
            ik=IKResultSchema.from_domain(state.ik) if state.ik else None,
            hand_path=[PointSchema.from_domain(p) for p in state.hand_path],
            hand_position=(
                PointSchema.from_domain(state.hand_position) if state.hand_position else None
            ),
            implement=ImplementSchema.from_domain(state.implement) if state.implement else None,
        )


class SwingRecordSchema(BaseModel):
    """
    A completed swing.
    """
    id: int = Field(..., ge=1, description="Swing number")
    start_time_ms: float = Field(..., description="Swing start timestamp")
    end_time_ms: float = Field(..., description="Swing end timestamp")
    duration_s: float = Field(..., description="Duration in seconds")
    hand_path: List[PointSchema] = Field(default_factory=list, description="Captured hand path")
    peak_phase: SwingPhaseEnum = Field(SwingPhaseEnum.FINISH, description="Last phase reached")

    @classmethod
    def from_domain(cls, record: SwingRecord) -> "SwingRecordSchema":
        return cls(
            id=record.id,
            start_time_ms=record.start_time_ms,
            end_time_ms=record.end_time_ms,
            duration_s=record.duration_s,
            hand_path=[PointSchema.from_domain(p) for p in record.hand_path],
            peak_phase=SwingPhaseEnum(record.peak_phase.value),
        )


class KinematicsSequenceRequest(BaseModel):
    """
    Pose frames to run through a fresh kinematics session, in timestamp order.
    """
    frames: List[PoseFrameSchema] = Field(..., min_length=1, description="Pose frames")


class KinematicsSequenceResponse(BaseModel):
    """
    Result of processing a frame sequence.
    """
    states: List[KinematicsStateSchema] = Field(default_factory=list, description="One state per frame")
    swings: List[SwingRecordSchema] = Field(default_factory=list, description="Completed swings")
    final_phase: SwingPhaseEnum = Field(..., description="Phase after the last frame")


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    mediapipe_available: bool = Field(..., description="Whether MediaPipe is working")
