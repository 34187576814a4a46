"""
REST API Routes

FastAPI routes for pose detection and batch kinematics processing.
For live streams use the WebSocket endpoint instead.
"""

import time
import logging
from typing import List, Tuple

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from .schemas import (
    PoseDetectionRequest,
    PoseDetectionResponse,
    PoseFrameSchema,
    KinematicsSequenceRequest,
    KinematicsSequenceResponse,
    KinematicsStateSchema,
    SwingRecordSchema,
    SwingPhaseEnum,
    HealthResponse,
)
from config import config
from core.domain import KinematicsState, MissingLandmarkError
from core.services import KinematicsSession

# Configure logging
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Create router
router = APIRouter()

# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check() -> HealthResponse:
    """
    Check if the API is running and MediaPipe is available.
    """
    mediapipe_ok = False
    try:
        from core.services.pose_detector import PoseDetector
        with PoseDetector(model_complexity=config.detector.model_complexity):
            mediapipe_ok = True
    except Exception as e:
        logger.warning(f"MediaPipe not available: {e}")

    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        mediapipe_available=mediapipe_ok
    )


# =============================================================================
# Pose Detection
# =============================================================================

@router.post(
    "/pose/detect",
    response_model=PoseDetectionResponse,
    tags=["Pose Detection"],
    summary="Detect pose in a single image"
)
async def detect_pose(request: PoseDetectionRequest) -> PoseDetectionResponse:
    """
    Detect the body pose in a base64-encoded image.

    Returns the 17 named landmarks in pixel coordinates, ready to be posted
    back to the kinematics endpoints.
    """
    start_time = time.time()

    try:
        from core.services.pose_detector import PoseDetector
        detector_config = config.detector
        with PoseDetector(
            model_complexity=detector_config.model_complexity,
            min_detection_confidence=detector_config.min_detection_confidence,
            min_tracking_confidence=detector_config.min_tracking_confidence,
        ) as detector:
            pose_frame = detector.detect_from_base64(
                request.image_base64,
                timestamp_ms=request.timestamp_ms,
                frame_number=request.frame_number
            )

        processing_time = (time.time() - start_time) * 1000

        if pose_frame is None:
            return PoseDetectionResponse(
                success=False,
                pose=None,
                error="No person detected in image",
                processing_time_ms=processing_time
            )

        return PoseDetectionResponse(
            success=True,
            pose=PoseFrameSchema.from_domain(pose_frame),
            error=None,
            processing_time_ms=processing_time
        )

    except Exception as e:
        logger.error(f"Pose detection failed: {e}")
        processing_time = (time.time() - start_time) * 1000
        return PoseDetectionResponse(
            success=False,
            pose=None,
            error=str(e),
            processing_time_ms=processing_time
        )


# =============================================================================
# Kinematics
# =============================================================================

@router.post(
    "/kinematics/sequence",
    response_model=KinematicsSequenceResponse,
    tags=["Kinematics"],
    summary="Run a pose sequence through a fresh kinematics session"
)
async def process_sequence(request: KinematicsSequenceRequest) -> KinematicsSequenceResponse:
    """
    Process pose frames in order and return one kinematics state per frame
    plus every swing completed along the way.
    """
    session, states = _run_session(request.frames)

    return KinematicsSequenceResponse(
        states=[KinematicsStateSchema.from_domain(state) for state in states],
        swings=[SwingRecordSchema.from_domain(record) for record in session.swings],
        final_phase=SwingPhaseEnum(session.engine.phase.value),
    )


@router.post(
    "/kinematics/export",
    response_class=PlainTextResponse,
    tags=["Kinematics"],
    summary="Joint angle history of a pose sequence as CSV"
)
async def export_sequence(request: KinematicsSequenceRequest) -> PlainTextResponse:
    """
    Process pose frames and return the joint angle history as CSV
    (one row per sample index, one column per joint).
    """
    session, _ = _run_session(request.frames)

    return PlainTextResponse(
        session.export_history_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=kinematics_export.csv"},
    )


# =============================================================================
# Helper Functions
# =============================================================================

def _run_session(
    frames: List[PoseFrameSchema],
) -> Tuple[KinematicsSession, List[KinematicsState]]:
    """
    Validate and process frames; malformed frames become HTTP 422.

    Timestamps must strictly increase, otherwise every frame would have
    dt = 0 and the phase machine could never advance.
    """
    domain_frames = []
    for index, frame_schema in enumerate(frames):
        frame = frame_schema.to_domain()
        try:
            frame.require()
        except MissingLandmarkError as e:
            raise HTTPException(status_code=422, detail=f"Frame {index}: {e}")

        if domain_frames and frame.timestamp_ms <= domain_frames[-1].timestamp_ms:
            raise HTTPException(
                status_code=422,
                detail=f"Frame {index}: timestamp not increasing "
                       f"({frame.timestamp_ms} <= {domain_frames[-1].timestamp_ms})"
            )
        domain_frames.append(frame)

    session = KinematicsSession()
    try:
        states = [result.state for result in session.process_all(domain_frames)]
    except Exception as e:
        logger.error(f"Kinematics processing failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        f"Processed {session.frames_processed} frames, {len(session.swings)} swing(s) detected"
    )
    return session, states
