"""
Pose API Schemas

Pydantic models for pose input and WebSocket messages.
These define the JSON structure for communication with the capture client.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.pose import Landmark, LandmarkName, PoseFrame


class LandmarkSchema(BaseModel):
    """
    Single body landmark.

    Coordinates are in pixels, y growing downward.
    """
    x: float = Field(..., allow_inf_nan=False, description="Horizontal position (px)")
    y: float = Field(..., allow_inf_nan=False, description="Vertical position (px, 0=top)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")
    name: LandmarkName = Field(..., description="Landmark name (e.g., 'left_wrist')")

    class Config:
        json_schema_extra = {
            "example": {
                "x": 312.5,
                "y": 240.0,
                "confidence": 0.92,
                "name": "left_wrist"
            }
        }

    @classmethod
    def from_domain(cls, landmark: Landmark) -> "LandmarkSchema":
        return cls(x=landmark.x, y=landmark.y, confidence=landmark.confidence, name=landmark.name)


class PoseFrameSchema(BaseModel):
    """
    All landmarks for one frame.
    """
    landmarks: List[LandmarkSchema] = Field(..., description="Named body landmarks")
    timestamp_ms: float = Field(0.0, ge=0, allow_inf_nan=False, description="Capture timestamp in milliseconds")
    frame_number: int = Field(0, ge=0, description="Sequential frame number")

    class Config:
        json_schema_extra = {
            "example": {
                "landmarks": [
                    {"x": 300.0, "y": 180.0, "confidence": 0.97, "name": "right_shoulder"}
                ],
                "timestamp_ms": 1500,
                "frame_number": 45
            }
        }

    def to_domain(self) -> PoseFrame:
        return PoseFrame.from_keypoints(
            (lm.model_dump() for lm in self.landmarks),
            timestamp_ms=self.timestamp_ms,
            frame_number=self.frame_number,
        )

    @classmethod
    def from_domain(cls, frame: PoseFrame) -> "PoseFrameSchema":
        return cls(
            landmarks=[LandmarkSchema.from_domain(lm) for lm in frame.landmarks.values()],
            timestamp_ms=frame.timestamp_ms,
            frame_number=frame.frame_number,
        )


class PoseDetectionRequest(BaseModel):
    """
    Request to detect pose in a base64-encoded image.
    """
    image_base64: str = Field(..., description="Base64 encoded JPEG/PNG image")
    timestamp_ms: float = Field(0.0, ge=0, description="Optional timestamp")
    frame_number: int = Field(0, ge=0, description="Optional frame number")


class PoseDetectionResponse(BaseModel):
    """
    Response from pose detection.
    """
    success: bool = Field(..., description="Whether detection succeeded")
    pose: Optional[PoseFrameSchema] = Field(None, description="Detected pose (null if no person found)")
    error: Optional[str] = Field(None, description="Error message if failed")
    processing_time_ms: float = Field(..., description="Time taken to process in milliseconds")


# =============================================================================
# WebSocket Message Schemas
# =============================================================================

class WebSocketMessageType(str, Enum):
    """Types of WebSocket messages."""
    # Client -> Server
    POSE = "pose"                      # Landmarks for one frame
    FRAME = "frame"                    # Camera image for detection + kinematics
    RESET = "reset"                    # Reset engine state
    EXPORT = "export"                  # Request joint history CSV
    END_SESSION = "end_session"        # End kinematics session

    # Server -> Client
    KINEMATICS = "kinematics"          # Kinematics state for one frame
    SWING_COMPLETED = "swing_completed"
    EXPORT_RESULT = "export_result"
    ERROR = "error"
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"


class WebSocketMessage(BaseModel):
    """
    Base WebSocket message structure.

    All WebSocket communication uses this format.
    """
    type: WebSocketMessageType = Field(..., description="Message type")
    data: dict = Field(default_factory=dict, description="Message payload")
    timestamp: float = Field(0.0, description="Timestamp in milliseconds")


class FrameMessage(BaseModel):
    """
    Camera frame sent for detection.
    """
    image_base64: str = Field(..., description="Base64 encoded frame")
    frame_number: int = Field(0, description="Frame sequence number")
