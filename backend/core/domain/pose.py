"""
Pose Domain Models

Data structures for representing the 2D body landmarks delivered by the
upstream pose-estimation service, one PoseFrame per video frame.

Landmark names follow the 17-point keypoint vocabulary (nose, eyes, ears,
shoulders, elbows, wrists, hips, knees, ankles). Coordinates are in pixels,
with y increasing downward.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .errors import MissingLandmarkError


class LandmarkName(str, Enum):
    """
    Anatomical landmark vocabulary.

    Values are the wire names used by the pose source, so
    LandmarkName("left_wrist") parses an incoming keypoint name.
    """
    # Face
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"

    # Upper body
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"

    # Lower body
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


# Every landmark referenced by a joint definition, segment length or IK chain.
REQUIRED_LANDMARKS: tuple[LandmarkName, ...] = (
    LandmarkName.LEFT_SHOULDER,
    LandmarkName.RIGHT_SHOULDER,
    LandmarkName.LEFT_ELBOW,
    LandmarkName.RIGHT_ELBOW,
    LandmarkName.LEFT_WRIST,
    LandmarkName.RIGHT_WRIST,
    LandmarkName.LEFT_HIP,
    LandmarkName.RIGHT_HIP,
    LandmarkName.LEFT_KNEE,
    LandmarkName.RIGHT_KNEE,
    LandmarkName.LEFT_ANKLE,
    LandmarkName.RIGHT_ANKLE,
)


@dataclass
class Landmark:
    """
    A single body landmark with 2D pixel coordinates and confidence.

    Attributes:
        x: Horizontal position in pixels
        y: Vertical position in pixels (grows downward)
        confidence: Detection confidence, clamped into [0.0, 1.0]; forced to
            0 when a coordinate is NaN or infinite
        name: Which anatomical point this landmark represents
    """
    x: float
    y: float
    confidence: float
    name: LandmarkName

    def __post_init__(self) -> None:
        self.confidence = float(self.confidence)
        if not (math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.confidence)):
            self.confidence = 0.0
        self.confidence = min(max(self.confidence, 0.0), 1.0)

    def is_visible(self, threshold: float) -> bool:
        """Check if landmark confidence is strictly above the threshold."""
        return (self.confidence > threshold
                and math.isfinite(self.x) and math.isfinite(self.y))


@dataclass
class PoseFrame:
    """
    All landmarks detected for a single instant.

    Attributes:
        landmarks: Landmarks keyed by name (at most one per name)
        timestamp_ms: Capture timestamp in milliseconds
        frame_number: Sequential frame number
    """
    landmarks: dict[LandmarkName, Landmark] = field(default_factory=dict)
    timestamp_ms: float = 0.0
    frame_number: int = 0

    @classmethod
    def from_landmarks(
        cls,
        landmarks: Iterable[Landmark],
        timestamp_ms: float = 0.0,
        frame_number: int = 0,
    ) -> "PoseFrame":
        """Build a frame from a landmark list; later duplicates win."""
        return cls(
            landmarks={lm.name: lm for lm in landmarks},
            timestamp_ms=timestamp_ms,
            frame_number=frame_number,
        )

    @classmethod
    def from_keypoints(
        cls,
        keypoints: Iterable[dict],
        timestamp_ms: float = 0.0,
        frame_number: int = 0,
    ) -> "PoseFrame":
        """
        Build a frame from raw keypoint dicts.

        Accepts {"x", "y", "score" | "confidence", "name"}. Keypoints without
        a name or with a name outside the vocabulary are skipped.
        """
        landmarks = []
        for kp in keypoints:
            try:
                name = LandmarkName(kp.get("name"))
            except ValueError:
                continue
            confidence = kp.get("confidence", kp.get("score", 0.0))
            landmarks.append(Landmark(
                x=float(kp["x"]),
                y=float(kp["y"]),
                confidence=float(confidence or 0.0),
                name=name,
            ))
        return cls.from_landmarks(landmarks, timestamp_ms, frame_number)

    def get(self, name: LandmarkName) -> Optional[Landmark]:
        """Get a specific landmark, or None if the pose source omitted it."""
        return self.landmarks.get(name)

    def confidence_of(self, name: LandmarkName) -> float:
        """Confidence of a landmark; absent landmarks count as 0."""
        landmark = self.landmarks.get(name)
        return landmark.confidence if landmark else 0.0

    def visible(self, name: LandmarkName, threshold: float) -> Optional[Landmark]:
        """Get a landmark only if its confidence is above the threshold."""
        landmark = self.landmarks.get(name)
        if landmark is None or not landmark.is_visible(threshold):
            return None
        return landmark

    def require(self, *names: LandmarkName) -> None:
        """
        Ensure the named landmarks are present (at any confidence).

        Raises:
            MissingLandmarkError: listing every absent name
        """
        wanted = names or REQUIRED_LANDMARKS
        missing = tuple(name for name in wanted if name not in self.landmarks)
        if missing:
            raise MissingLandmarkError(missing)
