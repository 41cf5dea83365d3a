from __future__ import annotations

import math

from burst_sim.geometry_utils import (
    Orientation,
    dedupe_consecutive,
    inward_normal,
    is_simple_polygon,
    line_intersection,
    polygon_orientation,
    ray_circle_intersect,
    ray_segment_intersect,
    wrap_angle,
)

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


def test_wrap_angle_range() -> None:
    for theta in (-7.0, -math.pi, 0.0, 3.0, 12.5):
        w = wrap_angle(theta)
        assert -math.pi <= w <= math.pi
        assert math.isclose(math.sin(w), math.sin(theta), abs_tol=1e-9)


def test_polygon_orientation() -> None:
    assert polygon_orientation(SQUARE) == Orientation.COUNTERCLOCKWISE
    assert polygon_orientation(SQUARE[::-1]) == Orientation.CLOCKWISE
    assert polygon_orientation([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]) == Orientation.COLLINEAR


def test_is_simple_polygon_rejects_bow_tie() -> None:
    assert is_simple_polygon(SQUARE)
    assert not is_simple_polygon([(0.0, 0.0), (10.0, 10.0), (10.0, 0.0), (0.0, 10.0)])


def test_inward_normal_depends_on_orientation() -> None:
    assert inward_normal((1.0, 0.0), Orientation.COUNTERCLOCKWISE) == (0.0, 1.0)
    nx, ny = inward_normal((1.0, 0.0), Orientation.CLOCKWISE)
    assert (nx, ny) == (0.0, -1.0)


def test_line_intersection_and_parallel() -> None:
    p = line_intersection((0.0, 1.0), (1.0, 0.0), (3.0, 0.0), (0.0, 1.0))
    assert p == (3.0, 1.0)
    assert line_intersection((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (-1.0, 0.0)) is None


def test_ray_segment_intersect() -> None:
    hit = ray_segment_intersect((0.0, 5.0), (1.0, 0.0), (10.0, 0.0), (10.0, 10.0))
    assert hit is not None
    assert math.isclose(hit.x, 10.0) and math.isclose(hit.y, 5.0)
    assert math.isclose(hit.t_ray, 10.0)
    # Behind the ray
    assert ray_segment_intersect((20.0, 5.0), (1.0, 0.0), (10.0, 0.0), (10.0, 10.0)) is None
    # Collinear overlap is not a crossing
    assert ray_segment_intersect((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (5.0, 0.0)) is None


def test_ray_circle_intersect() -> None:
    hits = ray_circle_intersect((0.0, 5.0), (0.0, -1.0), (0.0, 0.0), 1.0)
    assert [round(t, 9) for t, _ in hits] == [4.0, 6.0]
    assert ray_circle_intersect((5.0, 5.0), (1.0, 0.0), (0.0, 0.0), 1.0) == []


def test_dedupe_consecutive_wraps_around() -> None:
    pts = [(1.0, 1.0), (9.0, 1.0), (9.0, 1.0), (1.0, 1.0)]
    assert dedupe_consecutive(pts, 1e-9) == [(1.0, 1.0), (9.0, 1.0)]
