"""
Immutable oriented closed boundaries built from line and arc edges.

A ``BoundaryGeometry`` serves both as the wall outline and as the
configuration space derived from it. Two variants exist and are picked at
construction time: ``"polygon"`` (straight edges only) and ``"curved"``
(straight edges plus circular arcs produced by disk erosion).

Point and ray queries go through a lazily built STR-tree over edge
envelopes, then an exact per-edge test within the configured tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import math
import threading

import numpy as np
from shapely import STRtree
from shapely.geometry import LineString, Polygon, box
from shapely.geometry import Point as ShapelyPoint

from .config import DEFAULT_GEOMETRY, GeometryConfig
from .geometry_utils import (
    Orientation,
    Point,
    Vector,
    add,
    cross,
    dot,
    inward_normal,
    is_simple_polygon,
    normalize_2d,
    point_to_segment_distance,
    points_close,
    polygon_orientation,
    ray_circle_intersect,
    ray_segment_intersect,
    rotate_left,
    rotate_right,
    squared_distance,
)
from .outcome import Failure, Outcome

Bounds = Tuple[float, float, float, float]


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineEdge:
    """Straight boundary edge from ``start`` to ``end``."""

    start: Point
    end: Point

    @property
    def direction(self) -> Vector:
        return normalize_2d(self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def bounds(self) -> Bounds:
        """Return (xmin, ymin, xmax, ymax)."""
        (x1, y1), (x2, y2) = self.start, self.end
        return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)

    def midpoint(self) -> Point:
        return 0.5 * (self.start[0] + self.end[0]), 0.5 * (self.start[1] + self.end[1])

    def tangent(self, point: Point) -> Vector:
        return self.direction

    def contains(self, point: Point, tol: float) -> bool:
        dist, _, _ = point_to_segment_distance(
            point[0], point[1], self.start[0], self.start[1], self.end[0], self.end[1]
        )
        return dist <= tol

    def intersect_ray(self, origin: Point, direction: Vector, tol: float) -> List[Tuple[float, Point]]:
        hit = ray_segment_intersect(origin, direction, self.start, self.end, tol)
        if hit is None:
            return []
        return [(hit.t_ray, (hit.x, hit.y))]

    def sample(self, num: int = 2) -> List[Point]:
        return [self.start, self.end]


@dataclass(frozen=True)
class ArcEdge:
    """Circular arc from ``start`` to ``end`` around ``center``.

    ``sweep`` is the signed angle swept from start to end; positive means
    counter-clockwise about the centre.
    """

    center: Point
    radius: float
    start: Point
    end: Point
    sweep: float

    @property
    def start_angle(self) -> float:
        return math.atan2(self.start[1] - self.center[1], self.start[0] - self.center[0])

    @property
    def length(self) -> float:
        return abs(self.sweep) * self.radius

    @property
    def bounds(self) -> Bounds:
        cx, cy = self.center
        r = self.radius
        xs = [self.start[0], self.end[0]]
        ys = [self.start[1], self.end[1]]
        # Axis extremes of the circle that the arc actually passes through
        for px, py in ((cx + r, cy), (cx, cy + r), (cx - r, cy), (cx, cy - r)):
            if self._offset((px, py)) <= abs(self.sweep):
                xs.append(px)
                ys.append(py)
        return min(xs), min(ys), max(xs), max(ys)

    def _offset(self, point: Point) -> float:
        """Angle travelled from start to ``point`` in the sweep direction, in [0, 2*pi)."""
        a = math.atan2(point[1] - self.center[1], point[0] - self.center[0]) - self.start_angle
        if self.sweep < 0.0:
            a = -a
        return a % (2.0 * math.pi)

    def point_at(self, fraction: float) -> Point:
        angle = self.start_angle + self.sweep * fraction
        return (
            self.center[0] + self.radius * math.cos(angle),
            self.center[1] + self.radius * math.sin(angle),
        )

    def midpoint(self) -> Point:
        return self.point_at(0.5)

    def tangent(self, point: Point) -> Vector:
        radial = normalize_2d(point[0] - self.center[0], point[1] - self.center[1])
        return rotate_left(radial) if self.sweep > 0.0 else rotate_right(radial)

    def contains(self, point: Point, tol: float) -> bool:
        if points_close(point, self.start, tol) or points_close(point, self.end, tol):
            return True
        dist = math.hypot(point[0] - self.center[0], point[1] - self.center[1])
        if abs(dist - self.radius) > tol:
            return False
        offset = self._offset(point)
        angular_tol = tol / self.radius
        return offset <= abs(self.sweep) + angular_tol or offset >= 2.0 * math.pi - angular_tol

    def intersect_ray(self, origin: Point, direction: Vector, tol: float) -> List[Tuple[float, Point]]:
        return [
            (t, p)
            for t, p in ray_circle_intersect(origin, direction, self.center, self.radius)
            if self.contains(p, tol)
        ]

    def sample(self, num: int = 0) -> List[Point]:
        """Polyline approximation, endpoints exact."""
        if num < 2:
            num = max(2, int(math.ceil(abs(self.sweep) / (math.pi / 32.0))) + 1)
        angles = self.start_angle + self.sweep * np.linspace(0.0, 1.0, num)
        pts = [
            (self.center[0] + self.radius * math.cos(a), self.center[1] + self.radius * math.sin(a))
            for a in angles
        ]
        pts[0] = self.start
        pts[-1] = self.end
        return pts


Edge = Union[LineEdge, ArcEdge]


# ---------------------------------------------------------------------------
# Boundary geometry
# ---------------------------------------------------------------------------


class BoundaryGeometry:
    """Simple closed boundary with membership and ray-crossing queries.

    Instances are immutable once built; use ``from_points`` or
    ``from_edges`` which validate the input. The bounding box and the
    spatial index are computed on first use and memoised under a lock, so
    a boundary can be shared between threads for read-only queries.
    """

    def __init__(self, edges: Sequence[Edge], settings: GeometryConfig = DEFAULT_GEOMETRY) -> None:
        self._edges: Tuple[Edge, ...] = tuple(edges)
        self._settings = settings
        self._orientation = polygon_orientation(self.outline())
        self._kind = "curved" if any(isinstance(e, ArcEdge) for e in self._edges) else "polygon"
        self._lock = threading.RLock()
        self._bounds: Optional[Bounds] = None
        self._index: Optional[STRtree] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_points(
        cls,
        points: Sequence[Point],
        settings: Optional[GeometryConfig] = None,
    ) -> Outcome["BoundaryGeometry"]:
        """Polygon boundary through ``points`` in the given order."""
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) < 3:
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "fewer than 3 points")
        tol = (settings or DEFAULT_GEOMETRY).tolerance
        for i, p in enumerate(pts):
            if points_close(p, pts[(i + 1) % len(pts)], tol):
                return Outcome.fail(Failure.DEGENERATE_BOUNDARY, f"point {i} is repeated")
        if not is_simple_polygon(pts):
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "boundary is self-intersecting")
        if polygon_orientation(pts) == Orientation.COLLINEAR:
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "all points are collinear")
        edges = [LineEdge(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]
        return Outcome.success(cls(edges, settings or DEFAULT_GEOMETRY))

    @classmethod
    def from_edges(
        cls,
        edges: Sequence[Edge],
        settings: Optional[GeometryConfig] = None,
    ) -> Outcome["BoundaryGeometry"]:
        """Boundary from already ordered edges, which must form a closed simple curve."""
        settings = settings or DEFAULT_GEOMETRY
        if len(edges) < 3:
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "fewer than 3 edges")
        for i, edge in enumerate(edges):
            nxt = edges[(i + 1) % len(edges)]
            if not points_close(edge.end, nxt.start, settings.tolerance):
                return Outcome.fail(Failure.DEGENERATE_BOUNDARY, f"edge {i} is not connected to edge {i + 1}")
        geometry = cls(edges, settings)
        outline = geometry.outline()
        if geometry.orientation == Orientation.COLLINEAR:
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "boundary encloses no area")
        if not is_simple_polygon(outline):
            return Outcome.fail(Failure.DEGENERATE_BOUNDARY, "boundary is self-intersecting")
        return Outcome.success(geometry)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def vertices(self) -> List[Point]:
        return [e.start for e in self._edges]

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def settings(self) -> GeometryConfig:
        return self._settings

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def outline(self) -> List[Point]:
        """Closed polyline through the boundary (arcs sampled), without the repeated start."""
        pts: List[Point] = []
        for edge in self._edges:
            pts.extend(edge.sample()[:-1])
        return pts

    def to_polygon(self) -> Polygon:
        return Polygon(self.outline())

    # ------------------------------------------------------------------
    # Lazy caches
    # ------------------------------------------------------------------
    @property
    def bounds(self) -> Bounds:
        """Bounding box (xmin, ymin, xmax, ymax), computed once."""
        if self._bounds is None:
            with self._lock:
                if self._bounds is None:
                    boxes = np.array([e.bounds for e in self._edges], dtype=float)
                    self._bounds = (
                        float(boxes[:, 0].min()),
                        float(boxes[:, 1].min()),
                        float(boxes[:, 2].max()),
                        float(boxes[:, 3].max()),
                    )
        return self._bounds

    @property
    def index(self) -> STRtree:
        """STR-tree over edge envelopes (padded by the tolerance), computed once."""
        if self._index is None:
            with self._lock:
                if self._index is None:
                    tol = self._settings.tolerance
                    envelopes = [
                        box(xmin - tol, ymin - tol, xmax + tol, ymax + tol)
                        for xmin, ymin, xmax, ymax in (e.bounds for e in self._edges)
                    ]
                    self._index = STRtree(envelopes)
        return self._index

    def _candidates(self, geom) -> List[int]:
        return sorted(int(i) for i in self.index.query(geom))

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------
    def locate_edges(self, point: Point) -> List[int]:
        """Indices of every edge containing ``point``, in boundary order."""
        tol = self._settings.tolerance
        return [
            i for i in self._candidates(ShapelyPoint(point))
            if self._edges[i].contains(point, tol)
        ]

    def contains_on_boundary(self, point: Point) -> bool:
        """True iff ``point`` lies on an edge or vertex (not interior, not exterior)."""
        return bool(self.locate_edges(point))

    def edge_at(self, point: Point) -> Optional[Edge]:
        """Edge containing ``point``.

        At a shared vertex the first edge in boundary order is returned.
        """
        hits = self.locate_edges(point)
        return self._edges[hits[0]] if hits else None

    def edge_containing(self, start: Point, end: Point) -> Optional[Edge]:
        """First edge containing both endpoints of the segment start-end."""
        tol = self._settings.tolerance
        for i in self.locate_edges(start):
            edge = self._edges[i]
            if edge.contains(end, tol):
                return edge
        return None

    # ------------------------------------------------------------------
    # Ray queries
    # ------------------------------------------------------------------
    def _ray_length(self, origin: Point) -> float:
        """Clip length long enough for any real crossing of the boundary."""
        xmin, ymin, xmax, ymax = self.bounds
        farthest = max(
            math.hypot(x - origin[0], y - origin[1])
            for x in (xmin, xmax)
            for y in (ymin, ymax)
        )
        return farthest + math.hypot(xmax - xmin, ymax - ymin)

    def _ray_hits(
        self,
        origin: Point,
        direction: Vector,
        exclude: Sequence[int] = (),
    ) -> List[Tuple[float, Point]]:
        tol = self._settings.tolerance
        d = normalize_2d(*direction)
        if d == (0.0, 0.0):
            return []
        probe = LineString([origin, add(origin, d, self._ray_length(origin))])
        hits: List[Tuple[float, Point]] = []
        for i in self._candidates(probe):
            if i in exclude:
                continue
            hits.extend(self._edges[i].intersect_ray(origin, d, tol))
        hits.sort(key=lambda h: h[0])

        # The ray origin is not a crossing, and a crossing at a shared
        # vertex is reported by both incident edges but counts once.
        merged: List[Tuple[float, Point]] = []
        for t, p in hits:
            if points_close(p, origin, tol):
                continue
            if merged and points_close(merged[-1][1], p, tol):
                continue
            merged.append((t, p))
        return merged

    def all_intersections(self, origin: Point, direction: Vector) -> List[Point]:
        """Boundary crossings along the ray, nearest first, excluding the origin."""
        return [p for _, p in self._ray_hits(origin, direction)]

    def intersection_count(self, origin: Point, direction: Vector) -> int:
        return len(self._ray_hits(origin, direction))

    def first_intersection(
        self,
        origin: Point,
        direction: Vector,
        exclude: Sequence[int] = (),
    ) -> Optional[Point]:
        """Nearest crossing by squared distance, skipping edges in ``exclude``."""
        hits = self._ray_hits(origin, direction, exclude)
        if not hits:
            return None
        return min((p for _, p in hits), key=lambda p: squared_distance(p, origin))

    # ------------------------------------------------------------------
    # Heading validation
    # ------------------------------------------------------------------
    def inward_normal(self, edge_index: int, point: Point) -> Vector:
        return inward_normal(self._edges[edge_index].tangent(point), self._orientation)

    def is_reflex_vertex(self, point: Point, incident: Optional[Sequence[int]] = None) -> bool:
        """True if ``point`` is a vertex where the boundary turns away from the interior."""
        tol = self._settings.tolerance
        if incident is None:
            incident = self.locate_edges(point)
        incoming = next((i for i in incident if points_close(self._edges[i].end, point, tol)), None)
        outgoing = next((i for i in incident if points_close(self._edges[i].start, point, tol)), None)
        if incoming is None or outgoing is None:
            return False
        turn = cross(self._edges[incoming].tangent(point), self._edges[outgoing].tangent(point))
        return turn * int(self._orientation) < 0.0

    def admits_heading(
        self,
        point: Point,
        direction: Vector,
        margin: Optional[float] = None,
        incident: Optional[Sequence[int]] = None,
    ) -> bool:
        """True if ``direction`` does not point out of the region at boundary point ``point``.

        On an edge the inward normal must not oppose the direction. At a
        convex vertex every incident edge must agree; at a reflex vertex one
        is enough since the interior spans more than a half-plane there.
        """
        if margin is None:
            margin = self._settings.heading_margin
        if incident is None:
            incident = self.locate_edges(point)
        if not incident:
            return False
        d = normalize_2d(*direction)
        checks = [dot(self.inward_normal(i, point), d) >= -margin for i in incident]
        if len(checks) > 1 and self.is_reflex_vertex(point, incident):
            return any(checks)
        return all(checks)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, scene, color=None, width: int = 2) -> None:
        scene.draw_closed_curve(self.outline(), color=color or scene.theme["space_edge"], width=width)
