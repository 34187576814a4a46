"""Tests for the two-bone IK solver."""

import math

import pytest

from core.domain import Point
from core.services.ik_solver import compute_chain, segment_bearing, solve_two_bone


def test_reachable_target_is_hit():
    chain = compute_chain(Point(0, 0), Point(150, 0), 100, 100)

    assert chain.end.x == pytest.approx(150.0, abs=1e-6)
    assert chain.end.y == pytest.approx(0.0, abs=1e-6)
    assert math.dist(chain.joint, (0, 0)) == pytest.approx(100.0)
    assert math.dist(chain.joint, chain.end) == pytest.approx(100.0)


def test_bend_direction_mirrors_joint():
    up = compute_chain(Point(0, 0), Point(150, 0), 100, 100, bend_direction=1)
    down = compute_chain(Point(0, 0), Point(150, 0), 100, 100, bend_direction=-1)

    assert up.joint.y == pytest.approx(-100 * math.sin(math.acos(0.75)))
    assert down.joint.y == pytest.approx(-up.joint.y)
    assert down.joint.x == pytest.approx(up.joint.x)


def test_out_of_reach_target_is_clamped_to_full_extension():
    chain = compute_chain(Point(0, 0), Point(300, 0), 100, 100)

    assert chain.joint.x == pytest.approx(100.0)
    assert chain.end.x == pytest.approx(200.0)
    assert chain.end.y == pytest.approx(0.0, abs=1e-9)


def test_too_close_target_is_clamped_to_min_reach():
    angles = solve_two_bone(100, 60, 10)

    assert angles is not None
    assert angles.beta == pytest.approx(0.0, abs=1e-6)


def test_full_extension_has_straight_hinge():
    angles = solve_two_bone(100, 100, 200)

    assert angles.alpha == pytest.approx(0.0, abs=1e-9)
    assert angles.beta == pytest.approx(math.pi)


@pytest.mark.parametrize("l1, l2, d", [
    (0, 100, 50),
    (100, -1, 50),
    (100, 100, float("nan")),
    (100, 100, float("inf")),
    (50, 50, 0),
])
def test_degenerate_input_has_no_solution(l1, l2, d):
    assert solve_two_bone(l1, l2, d) is None


def test_degenerate_chain_falls_back_to_root_and_target():
    chain = compute_chain(Point(5, 5), Point(80, 5), 0, 100)

    assert chain.joint == Point(5, 5)
    assert chain.end == Point(80, 5)


def test_segment_bearing():
    assert segment_bearing(Point(0, 0), Point(0, 10)) == pytest.approx(math.pi / 2)
