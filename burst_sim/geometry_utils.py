"""
Geometry utilities for the bouncing-robot simulation.

Provides angle normalization, vector helpers, polygon orientation and
simplicity predicates, and the line/segment/ray/circle intersection
routines used by boundary queries and configuration-space erosion.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple
import math

from shapely.geometry import LinearRing

Point = Tuple[float, float]
Vector = Tuple[float, float]


class Orientation(IntEnum):
    """Winding order of a closed boundary."""

    CLOCKWISE = -1
    COLLINEAR = 0
    COUNTERCLOCKWISE = 1


# ---------------------------------------------------------------------------
# Angle helpers
# ---------------------------------------------------------------------------


def wrap_angle(theta: float) -> float:
    """Wrap angle to [-pi, pi] radians."""
    return (theta + math.pi) % (2.0 * math.pi) - math.pi


def heading_vector(angle: float) -> Vector:
    """Unit direction vector for a heading measured CCW from +x."""
    return math.cos(angle), math.sin(angle)


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------


def sub(a: Point, b: Point) -> Vector:
    return a[0] - b[0], a[1] - b[1]


def add(a: Point, v: Vector, scale: float = 1.0) -> Point:
    return a[0] + v[0] * scale, a[1] + v[1] * scale


def dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Vector, b: Vector) -> float:
    """z-component of the 2D cross product a x b."""
    return a[0] * b[1] - a[1] * b[0]


def squared_distance(a: Point, b: Point) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def normalize_2d(dx: float, dy: float) -> Tuple[float, float]:
    """Return (dx, dy) normalized; if zero vector, return (0, 0)."""
    length = math.hypot(dx, dy)
    if length < 1e-12:
        return 0.0, 0.0
    return dx / length, dy / length


def rotate_left(v: Vector) -> Vector:
    """Rotate a vector by +90 degrees."""
    return -v[1], v[0]


def rotate_right(v: Vector) -> Vector:
    """Rotate a vector by -90 degrees."""
    return v[1], -v[0]


def inward_normal(direction: Vector, orientation: Orientation) -> Vector:
    """Unit normal pointing into the region bounded by a boundary of the given winding.

    For a counter-clockwise boundary the interior lies to the left of every
    edge, so the direction is rotated +90 degrees; for a clockwise boundary
    it is rotated -90 degrees.
    """
    if orientation == Orientation.COUNTERCLOCKWISE:
        nx, ny = rotate_left(direction)
    else:
        nx, ny = rotate_right(direction)
    return normalize_2d(nx, ny)


def points_close(a: Point, b: Point, tol: float) -> bool:
    return abs(a[0] - b[0]) <= tol and abs(a[1] - b[1]) <= tol


# ---------------------------------------------------------------------------
# Polygon helpers
# ---------------------------------------------------------------------------


def signed_area(vertices: Sequence[Point]) -> float:
    """Shoelace signed area; positive for counter-clockwise vertex order."""
    n = len(vertices)
    area = 0.0
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[(i + 1) % n]
        area += xi * yj - xj * yi
    return 0.5 * area


def polygon_orientation(vertices: Sequence[Point], tol: float = 1e-12) -> Orientation:
    """Winding order implied by the vertex sequence.

    Zero area (within ``tol`` relative to the squared extent) is reported
    as COLLINEAR.
    """
    if len(vertices) < 3:
        return Orientation.COLLINEAR
    xs = [p[0] for p in vertices]
    ys = [p[1] for p in vertices]
    extent = max(max(xs) - min(xs), max(ys) - min(ys), 1.0)
    area = signed_area(vertices)
    if abs(area) <= tol * extent * extent:
        return Orientation.COLLINEAR
    return Orientation.COUNTERCLOCKWISE if area > 0.0 else Orientation.CLOCKWISE


def is_simple_polygon(vertices: Sequence[Point]) -> bool:
    """True if the closed ring through ``vertices`` does not self-intersect."""
    if len(vertices) < 3:
        return False
    return bool(LinearRing(vertices).is_simple)


def dedupe_consecutive(vertices: Sequence[Point], tol: float) -> List[Point]:
    """Drop consecutive (cyclically) coincident vertices."""
    out: List[Point] = []
    for p in vertices:
        if out and points_close(out[-1], p, tol):
            continue
        out.append(p)
    while len(out) > 1 and points_close(out[0], out[-1], tol):
        out.pop()
    return out


# ---------------------------------------------------------------------------
# Point-to-segment distance
# ---------------------------------------------------------------------------


def point_to_segment_distance(
    px: float,
    py: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> Tuple[float, float, float]:
    """
    Distance from point to line segment, and closest point on segment.

    Returns
    -------
    (distance, closest_x, closest_y)
    """
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq < 1e-24:
        return math.hypot(px - x1, py - y1), x1, y1
    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    cx = x1 + t * dx
    cy = y1 + t * dy
    return math.hypot(px - cx, py - cy), cx, cy


# ---------------------------------------------------------------------------
# Line, ray and circle intersection
# ---------------------------------------------------------------------------


@dataclass
class SegmentIntersection:
    """Result of a ray/segment intersection test."""

    x: float
    y: float
    t_ray: float  # distance along the (unit) ray
    t_seg: float  # parameter on the segment [0,1]


def line_intersection(
    p1: Point,
    d1: Vector,
    p2: Point,
    d2: Vector,
    eps: float = 1e-12,
) -> Optional[Point]:
    """Intersection of the supporting lines p1 + s*d1 and p2 + u*d2.

    Returns None when the lines are parallel (including coincident).
    """
    denom = cross(d1, d2)
    scale = math.hypot(*d1) * math.hypot(*d2)
    if abs(denom) <= eps * max(scale, 1e-300):
        return None
    s = cross(sub(p2, p1), d2) / denom
    return p1[0] + s * d1[0], p1[1] + s * d1[1]


def ray_segment_intersect(
    origin: Point,
    direction: Vector,
    a: Point,
    b: Point,
    tol: float = 1e-9,
) -> Optional[SegmentIntersection]:
    """
    Find the intersection of the ray origin + t*direction (t >= 0, direction
    unit length) with segment a-b. Parallel and collinear configurations
    report no intersection; the segment endpoints are included within
    ``tol``.
    """
    seg = sub(b, a)
    denom = cross(direction, seg)
    seg_len = math.hypot(*seg)
    if seg_len < 1e-300 or abs(denom) <= 1e-12 * seg_len:
        return None
    w = sub(a, origin)
    t = cross(w, seg) / denom
    s = cross(w, direction) / denom
    s_tol = tol / seg_len
    if t < -tol or s < -s_tol or s > 1.0 + s_tol:
        return None
    s = max(0.0, min(1.0, s))
    x = a[0] + s * seg[0]
    y = a[1] + s * seg[1]
    return SegmentIntersection(x=x, y=y, t_ray=max(t, 0.0), t_seg=s)


def ray_circle_intersect(
    origin: Point,
    direction: Vector,
    center: Point,
    radius: float,
) -> List[Tuple[float, Point]]:
    """All (t, point) with t >= 0 where the unit ray meets the circle."""
    ox, oy = sub(origin, center)
    b = ox * direction[0] + oy * direction[1]
    c = ox * ox + oy * oy - radius * radius
    disc = b * b - c
    if disc < 0.0:
        return []
    root = math.sqrt(disc)
    hits: List[Tuple[float, Point]] = []
    for t in sorted({-b - root, -b + root}):
        if t >= 0.0:
            hits.append((t, add(origin, direction, t)))
    return hits


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation: a + t*(b - a), t typically in [0,1]."""
    return a + t * (b - a)
