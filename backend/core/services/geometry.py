"""
Geometry Primitives

Plain 2D math used across the kinematics services: distances, joint angles
and exponential smoothing. Works with anything exposing .x and .y
(Landmark, Point).

This is pure mathematics - no external dependencies except numpy.
"""

from typing import Optional, Protocol

import numpy as np

from ..domain.kinematics import Point


class HasXY(Protocol):
    x: float
    y: float


def distance(p1: HasXY, p2: HasXY) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(p2.x - p1.x, p2.y - p1.y))


def midpoint(p1: HasXY, p2: HasXY) -> Point:
    """Point halfway between two points."""
    return Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def angle_at(a: HasXY, b: HasXY, c: HasXY) -> float:
    """
    Calculate the angle at vertex b formed by a-b-c.

    Uses the difference of the two ray bearings (atan2), folded into
    [0, 180] by reflecting any reading above 180.

    Args:
        a: First point
        b: Vertex point (where angle is measured)
        c: Third point

    Returns:
        Angle in degrees (0-180)

    Example:
        For elbow angle: shoulder -> elbow -> wrist
        angle = angle_at(shoulder, elbow, wrist)
    """
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    angle = abs(float(np.degrees(radians)))

    if angle > 180.0:
        angle = 360.0 - angle

    return angle


def ema(current: float, previous: Optional[float], alpha: float) -> float:
    """
    Exponential moving average step.

    Args:
        current: Newest raw value
        previous: Previous smoothed value (None on cold start)
        alpha: Weight of the newest value, in (0, 1]. Lower = smoother but more lag.

    Returns:
        Smoothed value; the raw value unchanged when there is no previous one
    """
    if previous is None:
        return current
    return alpha * current + (1 - alpha) * previous
