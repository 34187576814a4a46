"""
Inverse Kinematics Solver

Closed-form solver for a two-segment chain (shoulder-elbow-wrist or
hip-knee-ankle) using the law of cosines.

Targets out of reach are clamped, never rejected, so the reconstruction
stays continuous even when the measured geometry is slightly inconsistent.
"""

import math
from typing import NamedTuple, Optional

from ..domain.kinematics import Point
from .geometry import HasXY, distance


class TwoBoneAngles(NamedTuple):
    """
    Solution angles in radians.

    alpha: angle between the root->target line and the first segment
    beta: interior angle at the hinge joint
    """
    alpha: float
    beta: float


class IKChain(NamedTuple):
    """Reconstructed hinge joint and end effector positions."""
    joint: Point
    end: Point


def _clamped_acos(value: float) -> float:
    return math.acos(max(-1.0, min(1.0, value)))


def solve_two_bone(l1: float, l2: float, target_distance: float) -> Optional[TwoBoneAngles]:
    """
    Solve a two-segment chain for a target at a given distance from its root.

    The distance is first clamped into the reachable range [|l1-l2|, l1+l2].

    Args:
        l1: Length of the first segment (e.g. upper arm)
        l2: Length of the second segment (e.g. forearm)
        target_distance: Distance from the chain root to the target

    Returns:
        TwoBoneAngles, or None for degenerate input (zero-length segments,
        a target collapsed onto the root, non-finite values)
    """
    if not all(math.isfinite(v) for v in (l1, l2, target_distance)):
        return None
    if l1 <= 0 or l2 <= 0:
        return None

    dist = min(max(target_distance, abs(l1 - l2)), l1 + l2)
    if dist <= 0:
        return None

    cos_beta = (l1 * l1 + l2 * l2 - dist * dist) / (2 * l1 * l2)
    cos_alpha = (l1 * l1 + dist * dist - l2 * l2) / (2 * l1 * dist)

    if not (math.isfinite(cos_beta) and math.isfinite(cos_alpha)):
        return None

    # Rounding can push the cosines just outside [-1, 1] at full extension.
    return TwoBoneAngles(alpha=_clamped_acos(cos_alpha), beta=_clamped_acos(cos_beta))


def compute_chain(
    root: HasXY,
    target: HasXY,
    l1: float,
    l2: float,
    bend_direction: int = 1,
) -> IKChain:
    """
    Compute joint and end positions for a two-segment chain.

    Args:
        root: Chain root (e.g. shoulder)
        target: Desired end effector position (e.g. wrist)
        l1: Length of the first segment
        l2: Length of the second segment
        bend_direction: 1 or -1, selects which mirror-image solution to realize

    Returns:
        IKChain; when no solution exists the chain degenerates to
        joint=root, end=target
    """
    angles = solve_two_bone(l1, l2, distance(root, target))

    if angles is None:
        return IKChain(joint=Point(root.x, root.y), end=Point(target.x, target.y))

    bend = 1 if bend_direction >= 0 else -1
    base_angle = math.atan2(target.y - root.y, target.x - root.x)

    theta1 = base_angle - bend * angles.alpha
    joint = Point(root.x + l1 * math.cos(theta1), root.y + l1 * math.sin(theta1))

    # Second segment deviates from the first by the exterior angle (pi - beta).
    # The end is recomputed from the angles so a clamped target stays on the chain.
    theta2 = theta1 + bend * (math.pi - angles.beta)
    end = Point(joint.x + l2 * math.cos(theta2), joint.y + l2 * math.sin(theta2))

    return IKChain(joint=joint, end=end)


def segment_bearing(start: HasXY, end: HasXY) -> float:
    """Absolute bearing of a segment in radians."""
    return math.atan2(end.y - start.y, end.x - start.x)
