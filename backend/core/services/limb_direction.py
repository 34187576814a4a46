"""
Limb Direction Estimator

The pose source has no finger keypoints, so the club is estimated from the
forearms: it continues the average elbow -> wrist direction beyond the
grip (midpoint of both wrists).
"""

from typing import Optional

import numpy as np

from ..domain.kinematics import ImplementEstimate, Point
from ..domain.pose import LandmarkName, PoseFrame


class LimbDirectionEstimator:
    """
    Projects an implement head beyond the hands.

    Usage:
        estimator = LimbDirectionEstimator()
        club = estimator.estimate(frame)
        if club:
            print(club.grip, club.head, club.angle_deg)
    """

    MIN_CONFIDENCE = 0.4
    MIN_DIRECTION_PX = 10.0
    # Club is roughly 2.5x forearm length for a driver; not calibrated.
    LENGTH_MULTIPLIER = 2.5

    def estimate(self, frame: PoseFrame) -> Optional[ImplementEstimate]:
        """
        Estimate grip, head and direction of the implement.

        Returns:
            ImplementEstimate, or None if any wrist/elbow is missing or below
            confidence 0.4, or the forearm directions cancel out
        """
        names = (
            LandmarkName.LEFT_WRIST,
            LandmarkName.RIGHT_WRIST,
            LandmarkName.LEFT_ELBOW,
            LandmarkName.RIGHT_ELBOW,
        )
        points = []
        for name in names:
            landmark = frame.get(name)
            if landmark is None or landmark.confidence < self.MIN_CONFIDENCE:
                return None
            points.append(np.array([landmark.x, landmark.y], dtype=float))

        l_wrist, r_wrist, l_elbow, r_elbow = points

        grip = (l_wrist + r_wrist) / 2

        left_forearm = l_wrist - l_elbow
        right_forearm = r_wrist - r_elbow

        direction = (left_forearm + right_forearm) / 2
        length = float(np.linalg.norm(direction))
        if length < self.MIN_DIRECTION_PX:
            return None
        direction = direction / length

        forearm_length = (
            float(np.linalg.norm(left_forearm)) + float(np.linalg.norm(right_forearm))
        ) / 2
        head = grip + direction * (forearm_length * self.LENGTH_MULTIPLIER)

        return ImplementEstimate(
            grip=Point(float(grip[0]), float(grip[1])),
            head=Point(float(head[0]), float(head[1])),
            angle_deg=float(np.degrees(np.arctan2(direction[1], direction[0]))),
        )
