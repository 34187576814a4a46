"""
Pose Detector Service

Wrapper around MediaPipe Pose that turns a camera image into a PoseFrame
for the kinematics engine. MediaPipe is treated as an opaque landmark
source: this module only converts its output into our 17-name vocabulary
in pixel coordinates.

Note: MediaPipe's type stubs are incomplete, so we use type: ignore comments
for mp.solutions access. This is a known issue with the mediapipe package.
"""

import base64
from typing import Any, Optional

import cv2
import mediapipe as mp
import numpy as np

from ..domain.pose import Landmark, LandmarkName, PoseFrame


# MediaPipe's 33-point indices for the landmarks we track
MEDIAPIPE_INDEX: dict[LandmarkName, int] = {
    LandmarkName.NOSE: 0,
    LandmarkName.LEFT_EYE: 2,
    LandmarkName.RIGHT_EYE: 5,
    LandmarkName.LEFT_EAR: 7,
    LandmarkName.RIGHT_EAR: 8,
    LandmarkName.LEFT_SHOULDER: 11,
    LandmarkName.RIGHT_SHOULDER: 12,
    LandmarkName.LEFT_ELBOW: 13,
    LandmarkName.RIGHT_ELBOW: 14,
    LandmarkName.LEFT_WRIST: 15,
    LandmarkName.RIGHT_WRIST: 16,
    LandmarkName.LEFT_HIP: 23,
    LandmarkName.RIGHT_HIP: 24,
    LandmarkName.LEFT_KNEE: 25,
    LandmarkName.RIGHT_KNEE: 26,
    LandmarkName.LEFT_ANKLE: 27,
    LandmarkName.RIGHT_ANKLE: 28,
}


class PoseDetector:
    """
    Detects a single body pose using MediaPipe Pose.

    Usage:
        with PoseDetector() as detector:
            frame = detector.detect_pose(image, timestamp_ms=33)
            if frame:
                state = engine.process(frame, frame.timestamp_ms)
    """

    # MediaPipe solutions (type stubs are incomplete, so we store as Any)
    _mp_pose: Any

    def __init__(
        self,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        """
        Initialize the pose detector.

        Args:
            model_complexity: 0, 1, or 2. Higher = more accurate but slower.
            min_detection_confidence: Minimum confidence for person detection.
            min_tracking_confidence: Minimum confidence for landmark tracking.
        """
        # MediaPipe's type stubs don't include solutions, but it exists at runtime
        self._mp_pose = mp.solutions.pose  # type: ignore[attr-defined]

        self.pose = self._mp_pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def __enter__(self) -> "PoseDetector":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any]
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release MediaPipe resources."""
        self.pose.close()

    # -------------------------------------------------------------------------
    # Detection
    # -------------------------------------------------------------------------

    def detect_pose(
        self,
        image: np.ndarray,
        timestamp_ms: float = 0.0,
        frame_number: int = 0
    ) -> Optional[PoseFrame]:
        """
        Detect pose in a single BGR image (OpenCV format).

        Returns:
            PoseFrame with 17 landmarks in pixel coordinates, or None if no
            person detected
        """
        height, width = image.shape[:2]

        if len(image.shape) == 3 and image.shape[2] == 3:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        else:
            image_rgb = image

        results = self.pose.process(image_rgb)

        if not results.pose_landmarks:
            return None

        landmarks = self._convert_landmarks(results.pose_landmarks.landmark, width, height)

        return PoseFrame.from_landmarks(
            landmarks,
            timestamp_ms=timestamp_ms,
            frame_number=frame_number,
        )

    def detect_from_base64(
        self,
        base64_image: str,
        timestamp_ms: float = 0.0,
        frame_number: int = 0
    ) -> Optional[PoseFrame]:
        """
        Detect pose from a base64-encoded JPEG/PNG image.

        Returns:
            PoseFrame or None if the image could not be decoded or nobody was found
        """
        image_bytes = base64.b64decode(base64_image)
        nparr = np.frombuffer(image_bytes, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

        if image is None:
            return None

        return self.detect_pose(image, timestamp_ms, frame_number)

    # -------------------------------------------------------------------------
    # Private Helper Methods
    # -------------------------------------------------------------------------

    def _convert_landmarks(self, mp_landmarks: Any, width: int, height: int) -> list[Landmark]:
        """MediaPipe normalized landmarks -> named pixel landmarks."""
        landmarks = []
        for name, index in MEDIAPIPE_INDEX.items():
            mp_lm = mp_landmarks[index]
            landmarks.append(Landmark(
                x=mp_lm.x * width,
                y=mp_lm.y * height,
                confidence=mp_lm.visibility,
                name=name,
            ))
        return landmarks
