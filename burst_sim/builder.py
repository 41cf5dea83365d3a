"""
Configuration-space construction: erode a wall polygon by the robot radius.

Two strategies are available:

- ``ErosionStrategy.OFFSET`` translates every wall edge inward by the radius
  and reconnects neighbouring offset edges at the intersection of their
  supporting lines. Fast, straight edges only, and exact for convex rooms.
- ``ErosionStrategy.DISK`` is a true Minkowski erosion by a disk, computed
  with Shapely's negative buffer. Reflex wall corners produce circular
  arcs, which are recovered from the buffered ring as ``ArcEdge`` objects.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence
import math

import numpy as np
from shapely.geometry import Polygon
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry.polygon import orient

from .boundary import ArcEdge, BoundaryGeometry, Edge, LineEdge
from .config import DEFAULT_GEOMETRY, GeometryConfig
from .geometry_utils import (
    Orientation,
    Point,
    cross,
    dedupe_consecutive,
    dot,
    is_simple_polygon,
    line_intersection,
    polygon_orientation,
)
from .outcome import Failure, Outcome


class ErosionStrategy(str, Enum):
    DISK = "disk"
    OFFSET = "offset"


def erode(
    wall_points: Sequence[Point],
    orientation: Orientation,
    radius: float,
    strategy: ErosionStrategy = ErosionStrategy.DISK,
    settings: Optional[GeometryConfig] = None,
) -> Outcome[BoundaryGeometry]:
    """Set of valid robot-centre positions inside the wall, as a boundary.

    The result is always oriented counter-clockwise. Radius 0 returns the
    wall itself.
    """
    settings = settings or DEFAULT_GEOMETRY
    if radius < 0.0:
        return Outcome.fail(Failure.DEGENERATE_BOUNDARY, f"negative radius {radius}")
    pts = [(float(x), float(y)) for x, y in wall_points]
    if radius == 0.0:
        if orientation == Orientation.CLOCKWISE:
            pts = pts[::-1]
        return BoundaryGeometry.from_points(pts, settings)
    if ErosionStrategy(strategy) == ErosionStrategy.OFFSET:
        return _offset_erosion(pts, orientation, radius, settings)
    return _disk_erosion(pts, orientation, radius, settings)


# ---------------------------------------------------------------------------
# Offset and reconnect
# ---------------------------------------------------------------------------


def _offset_erosion(
    pts: List[Point],
    orientation: Orientation,
    radius: float,
    settings: GeometryConfig,
) -> Outcome[BoundaryGeometry]:
    tol = settings.tolerance
    starts = np.asarray(pts, dtype=float)
    ends = np.roll(starts, -1, axis=0)
    dirs = ends - starts
    dirs /= np.hypot(dirs[:, 0], dirs[:, 1])[:, None]
    if orientation == Orientation.COUNTERCLOCKWISE:
        normals = np.column_stack((-dirs[:, 1], dirs[:, 0]))
    else:
        normals = np.column_stack((dirs[:, 1], -dirs[:, 0]))
    shifted = starts + normals * radius

    # Slightly grown wall so vertices landing exactly on it still count
    wall = Polygon(pts).buffer(tol)
    n = len(pts)
    vertices: List[Point] = []
    for i in range(n):
        prev = (i - 1) % n
        d_prev = (float(dirs[prev, 0]), float(dirs[prev, 1]))
        d_cur = (float(dirs[i, 0]), float(dirs[i, 1]))
        p_cur = (float(shifted[i, 0]), float(shifted[i, 1]))
        p = line_intersection((float(shifted[prev, 0]), float(shifted[prev, 1])), d_prev, p_cur, d_cur)
        if p is None:
            if dot(d_prev, d_cur) > 0.0:
                # Collinear wall vertex: both offset edges lie on one line
                p = p_cur
            else:
                return Outcome.fail(
                    Failure.INTERNAL_INCONSISTENCY,
                    f"offset edges {prev} and {i} are anti-parallel",
                )
        if not wall.covers(ShapelyPoint(p)):
            return Outcome.fail(Failure.ROBOT_TOO_LARGE, f"offset vertex {i} lies outside the wall")
        vertices.append(p)

    vertices = dedupe_consecutive(vertices, tol)
    if len(vertices) <= 2:
        return Outcome.fail(Failure.SPACE_TOO_TIGHT, "offset polygon collapsed to a segment")
    eroded_orientation = polygon_orientation(vertices)
    if eroded_orientation == Orientation.COLLINEAR:
        return Outcome.fail(Failure.SPACE_TOO_TIGHT, "offset polygon has zero area")
    if eroded_orientation != orientation:
        return Outcome.fail(Failure.ROBOT_TOO_LARGE, "offset polygon is inverted")
    if not is_simple_polygon(vertices):
        return Outcome.fail(Failure.SPACE_TOO_TIGHT, "offset polygon self-intersects")

    if orientation == Orientation.CLOCKWISE:
        vertices.reverse()
    result = BoundaryGeometry.from_points(vertices, settings)
    if not result:
        return Outcome.fail(Failure.SPACE_TOO_TIGHT, result.detail)
    return result


# ---------------------------------------------------------------------------
# Minkowski erosion by a disk
# ---------------------------------------------------------------------------


def _disk_erosion(
    pts: List[Point],
    orientation: Orientation,
    radius: float,
    settings: GeometryConfig,
) -> Outcome[BoundaryGeometry]:
    wall = Polygon(pts)
    eroded = wall.buffer(-radius, quad_segs=settings.quad_segs, join_style="round")
    parts = [eroded] if isinstance(eroded, Polygon) else list(getattr(eroded, "geoms", []))
    regions = [
        g for g in parts
        if isinstance(g, Polygon) and not g.is_empty and g.area > settings.sliver_area
    ]
    if not regions:
        # A robot a hair smaller still fits: the room is exactly as wide as the robot
        probe = wall.buffer(-radius * (1.0 - 1e-6), quad_segs=settings.quad_segs, join_style="round")
        if not probe.is_empty:
            return Outcome.fail(Failure.SPACE_TOO_TIGHT, "robot centre fits only along a line")
        return Outcome.fail(Failure.ROBOT_TOO_LARGE, "no room left for the robot centre")
    if len(regions) > 1:
        return Outcome.fail(
            Failure.SPACE_TOO_TIGHT,
            f"eroded space splits into {len(regions)} disconnected regions",
        )
    region = orient(regions[0], sign=1.0)
    if len(region.interiors) > 0:
        return Outcome.fail(Failure.INTERNAL_INCONSISTENCY, "eroded region has holes")

    ring = dedupe_consecutive(list(region.exterior.coords)[:-1], settings.tolerance)
    edges = _recover_arcs(ring, _reflex_vertices(pts, orientation), radius, settings)
    result = BoundaryGeometry.from_edges(edges, settings)
    if not result:
        return Outcome.fail(Failure.SPACE_TOO_TIGHT, result.detail)
    return result


def _reflex_vertices(pts: Sequence[Point], orientation: Orientation) -> List[Point]:
    """Wall vertices where the wall turns away from its interior."""
    n = len(pts)
    reflex = []
    for i in range(n):
        a, b, c = pts[i - 1], pts[i], pts[(i + 1) % n]
        turn = cross((b[0] - a[0], b[1] - a[1]), (c[0] - b[0], c[1] - b[1]))
        if turn * int(orientation) < 0.0:
            reflex.append(b)
    return reflex


def _recover_arcs(
    ring: List[Point],
    centers: List[Point],
    radius: float,
    settings: GeometryConfig,
) -> List[Edge]:
    """Turn the buffered polyline back into line edges and true arcs.

    A chord belongs to an arc when both of its endpoints lie on the circle
    of the given radius around the same reflex wall vertex.
    """
    n = len(ring)
    tol = settings.arc_tolerance

    def on_circle(p: Point, c: Point) -> bool:
        return abs(math.hypot(p[0] - c[0], p[1] - c[1]) - radius) <= tol

    chord_center: List[Optional[int]] = []
    for i in range(n):
        a, b = ring[i], ring[(i + 1) % n]
        match = None
        for k, c in enumerate(centers):
            if on_circle(a, c) and on_circle(b, c):
                match = k
                break
        chord_center.append(match)

    # Start at a chord that does not continue the previous arc
    first = next(
        (i for i in range(n) if chord_center[i] is None or chord_center[i] != chord_center[i - 1]),
        None,
    )
    if first is None:
        return [LineEdge(ring[i], ring[(i + 1) % n]) for i in range(n)]

    edges: List[Edge] = []
    i = 0
    while i < n:
        idx = (first + i) % n
        k = chord_center[idx]
        a = ring[idx]
        if k is None:
            edges.append(LineEdge(a, ring[(idx + 1) % n]))
            i += 1
            continue
        c = centers[k]
        sweep = 0.0
        j = i
        while j < n and chord_center[(first + j) % n] == k:
            p = ring[(first + j) % n]
            q = ring[(first + j + 1) % n]
            u = (p[0] - c[0], p[1] - c[1])
            v = (q[0] - c[0], q[1] - c[1])
            sweep += math.atan2(cross(u, v), dot(u, v))
            j += 1
        end = ring[(first + j) % n]
        edges.append(ArcEdge(center=c, radius=radius, start=a, end=end, sweep=sweep))
        i = j
    return edges
