from __future__ import annotations

import math

import pytest

from burst_sim.boundary import ArcEdge, LineEdge
from burst_sim.builder import ErosionStrategy, erode
from burst_sim.geometry_utils import Orientation, point_to_segment_distance, points_close
from burst_sim.outcome import Failure
from burst_sim.world import WallSpace

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
ARROWHEAD = [(0.0, 20.0), (-20.0, -20.0), (0.0, 0.0), (20.0, -20.0)]
PENTAGON = [
    (10.0 * math.cos(2.0 * math.pi * k / 5.0), 10.0 * math.sin(2.0 * math.pi * k / 5.0))
    for k in range(5)
]
DUMBBELL = [
    (0.0, 0.0), (4.0, 0.0), (4.0, 1.8), (6.0, 1.8), (6.0, 0.0), (10.0, 0.0),
    (10.0, 4.0), (6.0, 4.0), (6.0, 2.2), (4.0, 2.2), (4.0, 4.0), (0.0, 4.0),
]
STRATEGIES = [ErosionStrategy.DISK, ErosionStrategy.OFFSET]


def build(points, radius, strategy):
    wall = WallSpace.create(points, strategy=strategy).unwrap()
    return wall.construct_configuration_space(radius)


def distance_to_wall(point, wall_points) -> float:
    n = len(wall_points)
    return min(
        point_to_segment_distance(point[0], point[1], *wall_points[i], *wall_points[(i + 1) % n])[0]
        for i in range(n)
    )


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_unit_inset_square(strategy) -> None:
    space = build(SQUARE, 1.0, strategy).unwrap()
    assert space.kind == "polygon"
    assert space.orientation == Orientation.COUNTERCLOCKWISE
    for corner in [(1.0, 1.0), (9.0, 1.0), (9.0, 9.0), (1.0, 9.0)]:
        assert space.contains_on_boundary(corner)
        assert any(points_close(corner, v, 1e-9) for v in space.vertices)
    for midpoint in [(5.0, 1.0), (9.0, 5.0), (5.0, 9.0), (1.0, 5.0)]:
        assert space.contains_on_boundary(midpoint)
    assert not space.contains_on_boundary((5.0, 5.0))
    assert not space.contains_on_boundary((0.0, 0.0))
    assert math.isclose(space.to_polygon().area, 64.0, rel_tol=1e-9)


def test_offset_square_has_exactly_four_vertices() -> None:
    space = build(SQUARE, 1.0, ErosionStrategy.OFFSET).unwrap()
    assert space.vertices == [(1.0, 1.0), (9.0, 1.0), (9.0, 9.0), (1.0, 9.0)]


def test_clockwise_wall_erodes_to_counterclockwise_space() -> None:
    for strategy in STRATEGIES:
        space = build(SQUARE[::-1], 1.0, strategy).unwrap()
        assert space.orientation == Orientation.COUNTERCLOCKWISE
        assert space.contains_on_boundary((5.0, 1.0))


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_robot_too_large(strategy) -> None:
    small = [(0.0, 0.0), (0.5, 0.0), (0.5, 0.5), (0.0, 0.5)]
    result = build(small, 1.0, strategy)
    assert not result
    assert result.failure == Failure.ROBOT_TOO_LARGE


def test_tight_fit_offset() -> None:
    corridor = [(0.0, 0.0), (10.0, 0.0), (10.0, 2.0), (0.0, 2.0)]
    result = build(corridor, 1.0, ErosionStrategy.OFFSET)
    assert not result
    assert result.failure == Failure.SPACE_TOO_TIGHT


def test_tight_fit_disk() -> None:
    corridor = [(0.0, 0.0), (10.0, 0.0), (10.0, 2.0), (0.0, 2.0)]
    result = build(corridor, 1.0, ErosionStrategy.DISK)
    assert not result
    assert result.failure == Failure.SPACE_TOO_TIGHT


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_dumbbell_splits_into_two_regions(strategy) -> None:
    result = build(DUMBBELL, 1.0, strategy)
    assert not result
    assert result.failure == Failure.SPACE_TOO_TIGHT


def test_negative_radius_is_degenerate() -> None:
    result = erode(SQUARE, Orientation.COUNTERCLOCKWISE, -1.0)
    assert result.failure == Failure.DEGENERATE_BOUNDARY


def test_zero_radius_returns_wall() -> None:
    space = erode(SQUARE, Orientation.COUNTERCLOCKWISE, 0.0).unwrap()
    assert space.vertices == SQUARE


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("wall_points", [SQUARE, PENTAGON])
def test_convex_erosion_keeps_radius_distance(strategy, wall_points) -> None:
    radius = 1.5
    space = build(wall_points, radius, strategy).unwrap()
    for v in space.vertices:
        assert distance_to_wall(v, wall_points) >= radius - 1e-7
    for edge in space.edges:
        assert math.isclose(distance_to_wall(edge.midpoint(), wall_points), radius, abs_tol=1e-7)


def test_arrowhead_disk_has_arc_around_reflex_vertex() -> None:
    space = build(ARROWHEAD, 1.0, ErosionStrategy.DISK).unwrap()
    assert space.kind == "curved"
    arcs = [e for e in space.edges if isinstance(e, ArcEdge)]
    assert len(arcs) == 1
    arc = arcs[0]
    assert points_close(arc.center, (0.0, 0.0), 1e-9)
    assert math.isclose(arc.radius, 1.0)
    assert math.isclose(abs(arc.sweep), math.pi / 2.0, abs_tol=1e-6)
    assert space.contains_on_boundary((0.0, 1.0))
    assert not space.contains_on_boundary((0.0, -1.0))


def test_arrowhead_offset_reconnects_at_reflex_vertex() -> None:
    space = build(ARROWHEAD, 1.0, ErosionStrategy.OFFSET).unwrap()
    assert space.kind == "polygon"
    assert all(isinstance(e, LineEdge) for e in space.edges)
    assert space.contains_on_boundary((0.0, math.sqrt(2.0)))


def test_l_room_disk_erosion() -> None:
    wall = WallSpace.from_named_map("l_room").unwrap()
    space = wall.construct_configuration_space(1.0).unwrap()
    arcs = [e for e in space.edges if isinstance(e, ArcEdge)]
    assert len(arcs) == 1
    assert points_close(arcs[0].center, (5.0, 5.0), 1e-9)
    assert space.contains_on_boundary((5.0, 4.0))
    assert space.contains_on_boundary((4.0, 5.0))
    diag = 5.0 - 1.0 / math.sqrt(2.0)
    assert space.contains_on_boundary((diag, diag))
    assert not space.contains_on_boundary((4.0, 4.0))
