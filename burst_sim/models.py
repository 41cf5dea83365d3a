from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import math
import random

from .boundary import BoundaryGeometry
from .geometry_utils import Point, heading_vector, points_close
from .outcome import Failure, Outcome


# ---------------------------------------------------------------------------
# Rotation noise
# ---------------------------------------------------------------------------


class RotationModel:
    """Uniform rotational noise on a commanded heading.

    ``sample(angle)`` returns ``angle + u * max_rotation_error`` with
    ``u ~ U[-1, 1]``, so every sample lies within
    ``[min_deviation(angle), max_deviation(angle)]``.
    """

    def __init__(
        self,
        max_rotation_error: float,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.max_rotation_error = float(max_rotation_error)
        self.rng = rng if rng is not None else random.Random(seed)

    def _draw(self) -> float:
        return self.rng.uniform(-1.0, 1.0)

    def sample(self, angle: float) -> float:
        return angle + self._draw() * self.max_rotation_error

    def __call__(self, angle: float) -> float:
        return self.sample(angle)

    def max_deviation(self, angle: float) -> float:
        return angle + self.max_rotation_error

    def min_deviation(self, angle: float) -> float:
        return angle - self.max_rotation_error


class MaximumRotationModel(RotationModel):
    """Rotation model that always applies the full positive error (deterministic)."""

    def _draw(self) -> float:
        return 1.0


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearPath:
    """Straight path between two distinct points of a configuration space."""

    start: Point
    end: Point

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


class LinearMovementModel:
    """Straight-line movement until the robot next meets the configuration-space boundary.

    The robot starts on the boundary, so the edges it already touches are
    ignored: travelling along an edge ends at the next edge it meets, and
    leaving a corner never reports the corner itself.
    """

    def __init__(self, heading_margin: Optional[float] = None) -> None:
        self.heading_margin = heading_margin

    def __call__(self, origin: Point, angle: float, space: BoundaryGeometry) -> Outcome[Point]:
        incident = space.locate_edges(origin)
        if not incident:
            return Outcome.fail(Failure.INVALID_ORIGIN, f"{origin} is not on the configuration space boundary")

        direction = heading_vector(angle)
        if not space.admits_heading(origin, direction, margin=self.heading_margin, incident=incident):
            return Outcome.fail(Failure.INVALID_HEADING, f"heading {angle:.6f} points out of the space at {origin}")

        hit = space.first_intersection(origin, direction, exclude=incident)
        if hit is None:
            return Outcome.fail(Failure.NO_INTERSECTION, f"no boundary ahead of {origin} at heading {angle:.6f}")
        if points_close(hit, origin, space.settings.tolerance):
            return Outcome.fail(Failure.ZERO_LENGTH_MOVEMENT, f"movement from {origin} has zero length")
        return Outcome.success(hit)

    def generate_path(self, origin: Point, angle: float, space: BoundaryGeometry) -> Outcome[LinearPath]:
        endpoint = self(origin, angle, space)
        if not endpoint:
            return Outcome.fail(endpoint.failure, endpoint.detail)
        if not space.contains_on_boundary(endpoint.value):
            return Outcome.fail(Failure.INTERNAL_INCONSISTENCY, f"endpoint {endpoint.value} left the boundary")
        return Outcome.success(LinearPath(start=origin, end=endpoint.value))
