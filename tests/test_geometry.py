"""
Tests for arena geometry (Point, Ray).

Run with: python -m pytest tests/test_geometry.py -v
"""

import math

import pytest

from engine.geometry import Point, Ray


class TestPoint:
    """Tests for Point"""

    def test_distance(self):
        assert Point(0, 0).distance(Point(3, 4)) == 5.0

    def test_distance_is_symmetric(self):
        a, b = Point(10, 20), Point(-5, 7)
        assert a.distance(b) == b.distance(a)

    def test_midpoint_truncates(self):
        assert Point(0, 0).midpoint(Point(5, 9)) == Point(2, 4)

    def test_average_truncates_toward_zero(self):
        points = [Point(0, 0), Point(1, 1), Point(1, 2)]
        # mean (0.67, 1.0)
        assert Point.average(points) == Point(0, 1)

    def test_average_single_point(self):
        assert Point.average([Point(7, 9)]) == Point(7, 9)

    def test_average_empty_raises(self):
        with pytest.raises(ValueError):
            Point.average([])

    def test_sorted_by_proximity(self):
        origin = Point(0, 0)
        far, near, mid = Point(100, 0), Point(1, 1), Point(0, 50)
        assert origin.sorted_by_proximity([far, near, mid]) == [near, mid, far]

    def test_points_are_immutable(self):
        p = Point(1, 2)
        with pytest.raises(Exception):
            p.x = 5


class TestRay:
    """Tests for Ray (directed segment)"""

    def test_advance_shifts_target_to_origin(self):
        ray = Ray(Point(0, 0), Point(10, 0))
        ray.advance(Point(10, 10))
        assert ray.origin == Point(10, 0)
        assert ray.target == Point(10, 10)

    def test_reversed_swaps_ends(self):
        ray = Ray(Point(1, 2), Point(3, 4))
        rev = ray.reversed()
        assert rev.origin == Point(3, 4)
        assert rev.target == Point(1, 2)

    def test_opposite_keeps_origin_and_reflects_target(self):
        ray = Ray(Point(10, 10), Point(14, 6))
        opp = ray.opposite()
        assert opp.origin == Point(10, 10)
        assert opp.target == Point(6, 14)

    def test_opposite_twice_round_trips(self):
        ray = Ray(Point(100, 200), Point(160, 120))
        twice = ray.opposite().opposite()
        assert twice.origin == ray.origin
        assert twice.target == ray.target

    def test_opposite_does_not_mutate(self):
        ray = Ray(Point(0, 0), Point(5, 5))
        ray.opposite()
        assert ray.target == Point(5, 5)

    def test_rotated_quarter_turn(self):
        ray = Ray(Point(0, 0), Point(10, 0)).rotated(math.pi / 2)
        assert ray.origin == Point(0, 0)
        assert ray.target == Point(0, 10)

    def test_rotated_half_turn_around_offset_origin(self):
        ray = Ray(Point(50, 50), Point(60, 50)).rotated(math.pi)
        assert ray.target == Point(40, 50)

    def test_angle_between_is_signed(self):
        east = Ray(Point(0, 0), Point(1, 0))
        north = Ray(Point(0, 0), Point(0, 1))
        assert east.angle_between(north) == pytest.approx(math.pi / 2)
        assert north.angle_between(east) == pytest.approx(-math.pi / 2)

    def test_angle_between_opposite_rays(self):
        ray = Ray(Point(5, 5), Point(9, 8))
        assert abs(ray.angle_between(ray.opposite())) == pytest.approx(math.pi)

    def test_length(self):
        assert Ray(Point(0, 0), Point(6, 8)).length == 10.0
