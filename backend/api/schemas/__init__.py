"""
API Schemas

Pydantic models for request/response validation.
"""

from .pose import (
    LandmarkSchema,
    PoseFrameSchema,
    PoseDetectionRequest,
    PoseDetectionResponse,
    WebSocketMessageType,
    WebSocketMessage,
    FrameMessage,
)

from .kinematics import (
    SwingPhaseEnum,
    PointSchema,
    JointAngleSchema,
    SegmentLengthsSchema,
    IKResultSchema,
    ImplementSchema,
    KinematicsStateSchema,
    SwingRecordSchema,
    KinematicsSequenceRequest,
    KinematicsSequenceResponse,
    HealthResponse,
)

__all__ = [
    # Pose schemas
    "LandmarkSchema",
    "PoseFrameSchema",
    "PoseDetectionRequest",
    "PoseDetectionResponse",
    "WebSocketMessageType",
    "WebSocketMessage",
    "FrameMessage",
    # Kinematics schemas
    "SwingPhaseEnum",
    "PointSchema",
    "JointAngleSchema",
    "SegmentLengthsSchema",
    "IKResultSchema",
    "ImplementSchema",
    "KinematicsStateSchema",
    "SwingRecordSchema",
    "KinematicsSequenceRequest",
    "KinematicsSequenceResponse",
    "HealthResponse",
]
