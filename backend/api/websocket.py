"""
WebSocket Handler

Real-time kinematics via WebSocket connection.
The capture client streams pose landmarks (or camera frames) and receives a
kinematics state per frame, plus an event whenever a swing completes.
"""

import json
import time
import logging
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from .schemas import (
    WebSocketMessageType,
    WebSocketMessage,
    PoseFrameSchema,
    FrameMessage,
    KinematicsStateSchema,
    SwingRecordSchema,
)
from config import config
from core.domain import MissingLandmarkError, PoseFrame
from core.services import KinematicsSession

# Configure logging
logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConnectionManager:
    """
    Manages WebSocket connections.

    Each connection owns one KinematicsSession, so camera streams never
    share smoothing or phase state. The pose detector is created on the
    first camera frame only.
    """

    def __init__(self):
        self.active_connections: list[WebSocket] = []
        self.sessions: dict[WebSocket, KinematicsSession] = {}
        self.pose_detectors: dict[WebSocket, Any] = {}

    async def connect(self, websocket: WebSocket) -> None:
        """Accept new WebSocket connection."""
        await websocket.accept()
        self.active_connections.append(websocket)
        self.sessions[websocket] = KinematicsSession()

        logger.info(f"New WebSocket connection. Total: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Handle WebSocket disconnection."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

        self.sessions.pop(websocket, None)

        detector = self.pose_detectors.pop(websocket, None)
        if detector is not None:
            detector.close()

        logger.info(f"WebSocket disconnected. Remaining: {len(self.active_connections)}")

    def get_session(self, websocket: WebSocket) -> Optional[KinematicsSession]:
        """Get kinematics session for a connection."""
        return self.sessions.get(websocket)

    def get_detector(self, websocket: WebSocket) -> Any:
        """Get (or lazily create) the pose detector for a connection."""
        detector = self.pose_detectors.get(websocket)
        if detector is None:
            from core.services.pose_detector import PoseDetector
            detector = PoseDetector(
                model_complexity=config.detector.model_complexity,
                min_detection_confidence=config.detector.min_detection_confidence,
                min_tracking_confidence=config.detector.min_tracking_confidence,
            )
            self.pose_detectors[websocket] = detector
        return detector

    async def send(self, websocket: WebSocket, msg_type: WebSocketMessageType, data: dict) -> None:
        """Send a typed message to a specific connection."""
        try:
            await websocket.send_json({
                "type": msg_type.value,
                "data": data,
                "timestamp": _now_ms(),
            })
        except Exception as e:
            logger.error(f"Failed to send WebSocket message: {e}")

    async def send_error(self, websocket: WebSocket, error: str) -> None:
        await self.send(websocket, WebSocketMessageType.ERROR, {"error": error})


# Global connection manager
manager = ConnectionManager()


async def websocket_endpoint(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for real-time kinematics.

    Message format (client -> server):
    {
        "type": "pose",
        "data": {"landmarks": [{"x": 310, "y": 220, "confidence": 0.9, "name": "left_wrist"}, ...],
                 "frame_number": 0},
        "timestamp": 1533.3
    }

    Other client types: "frame" (data.image_base64), "reset", "export",
    "end_session".

    Message format (server -> client):
    {
        "type": "kinematics",
        "data": {"frame_number": 0, "state": { ... }, "processing_time_ms": 0.4},
        "timestamp": 1704067200025
    }

    A "swing_completed" message follows whenever a swing finishes.
    """
    await manager.connect(websocket)

    try:
        await manager.send(websocket, WebSocketMessageType.SESSION_STARTED, {
            "message": "Connected to swing kinematics stream"
        })

        while True:
            try:
                message = await websocket.receive_json()
            except json.JSONDecodeError:
                await manager.send_error(websocket, "Invalid JSON")
                continue

            try:
                envelope = WebSocketMessage.model_validate(message)
            except ValidationError:
                msg_type = message.get("type") if isinstance(message, dict) else None
                await manager.send_error(websocket, f"Unknown message type: {msg_type}")
                continue

            msg_type = envelope.type

            if msg_type == WebSocketMessageType.POSE:
                await handle_pose(websocket, envelope)

            elif msg_type == WebSocketMessageType.FRAME:
                await handle_frame(websocket, envelope)

            elif msg_type == WebSocketMessageType.RESET:
                session = manager.get_session(websocket)
                if session:
                    session.reset()
                await manager.send(websocket, WebSocketMessageType.KINEMATICS, {
                    "message": "Session reset"
                })

            elif msg_type == WebSocketMessageType.EXPORT:
                session = manager.get_session(websocket)
                await manager.send(websocket, WebSocketMessageType.EXPORT_RESULT, {
                    "csv": session.export_history_csv() if session else ""
                })

            elif msg_type == WebSocketMessageType.END_SESSION:
                await manager.send(websocket, WebSocketMessageType.SESSION_ENDED, {
                    "message": "Session ended"
                })
                break

            else:
                await manager.send_error(websocket, f"Message type not accepted from client: {msg_type.value}")

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        manager.disconnect(websocket)


async def handle_pose(websocket: WebSocket, message: WebSocketMessage) -> None:
    """
    Validate landmarks for one frame and run them through the session.
    """
    try:
        data = dict(message.data)
        data.setdefault("timestamp_ms", message.timestamp)
        frame = PoseFrameSchema.model_validate(data).to_domain()
        frame.require()
    except ValidationError as e:
        await manager.send_error(websocket, f"Invalid pose: {e.errors()[0]['msg']}")
        return
    except MissingLandmarkError as e:
        await manager.send_error(websocket, str(e))
        return

    await _process(websocket, frame)


async def handle_frame(websocket: WebSocket, message: WebSocketMessage) -> None:
    """
    Detect the pose in a camera frame, then run it through the session.
    """
    try:
        frame_message = FrameMessage.model_validate(message.data)
    except ValidationError:
        await manager.send_error(websocket, "No image data provided")
        return

    try:
        detector = manager.get_detector(websocket)
        pose_frame = detector.detect_from_base64(
            frame_message.image_base64,
            timestamp_ms=message.timestamp,
            frame_number=frame_message.frame_number,
        )
    except Exception as e:
        logger.error(f"Frame processing error: {e}")
        await manager.send_error(websocket, str(e))
        return

    if pose_frame is None:
        # Nobody in view: an empty frame still drives the body-visibility gate
        pose_frame = PoseFrame(
            timestamp_ms=message.timestamp,
            frame_number=frame_message.frame_number,
        )

    await _process(websocket, pose_frame)


async def _process(websocket: WebSocket, frame: PoseFrame) -> None:
    session = manager.get_session(websocket)
    if session is None:
        await manager.send_error(websocket, "Session not initialized")
        return

    start_time = time.time()
    result = session.process(frame, frame.timestamp_ms)
    processing_time = (time.time() - start_time) * 1000

    await manager.send(websocket, WebSocketMessageType.KINEMATICS, {
        "frame_number": frame.frame_number,
        "state": KinematicsStateSchema.from_domain(result.state).model_dump(mode="json"),
        "processing_time_ms": processing_time,
    })

    if result.completed_swing is not None:
        await manager.send(websocket, WebSocketMessageType.SWING_COMPLETED, {
            "swing": SwingRecordSchema.from_domain(result.completed_swing).model_dump(mode="json"),
        })
