from __future__ import annotations

from typing import Any, Dict, List, Optional
import math

from shapely.geometry import LineString, Polygon

from .boundary import BoundaryGeometry
from .geometry_utils import Point, wrap_angle
from .models import LinearMovementModel, RotationModel
from .outcome import Failure, Outcome


class Robot:
    """Circular, blind robot that bounces between walls.

    The robot never sees the room. It picks a heading, the rotation model
    perturbs it, and the movement model reports where the straight path
    next meets the configuration-space boundary.

    Parameters
    ----------
    radius : float
        Robot radius, fixed for the lifetime of the robot.
    max_rotation_error : float
        Half-width of the uniform heading noise (radians).
    rotation_seed : int, optional
        Seed for the rotation model's PRNG.
    rotation_model, movement_model : optional
        Override the default ``RotationModel`` / ``LinearMovementModel``.
    logger : optional
        Anything with ``log_step(dict)``; every move attempt is recorded.
    """

    def __init__(
        self,
        radius: float,
        max_rotation_error: float,
        rotation_seed: Optional[int] = None,
        rotation_model: Optional[RotationModel] = None,
        movement_model: Optional[LinearMovementModel] = None,
        logger=None,
    ) -> None:
        self.radius = float(radius)
        self.rotation_model = rotation_model or RotationModel(max_rotation_error, seed=rotation_seed)
        self.movement_model = movement_model or LinearMovementModel()
        self.logger = logger
        self.position: Optional[Point] = None
        self.steps = 0
        self._space: Optional[BoundaryGeometry] = None

    # ------------------------------------------------------------------
    # Configuration space and placement
    # ------------------------------------------------------------------
    @property
    def configuration_space(self) -> Optional[BoundaryGeometry]:
        return self._space

    def set_configuration_space(self, space: BoundaryGeometry) -> None:
        """Assign a new configuration space; the old position no longer applies."""
        self._space = space
        self.position = None

    def place(self, point: Point) -> Outcome[Point]:
        if self._space is None:
            return Outcome.fail(Failure.NO_CONFIGURATION_SPACE, "robot has no configuration space")
        point = (float(point[0]), float(point[1]))
        if not self._space.contains_on_boundary(point):
            return Outcome.fail(Failure.INVALID_ORIGIN, f"{point} is not on the configuration space boundary")
        self.position = point
        return Outcome.success(point)

    def place_at_vertex(self, index: int = 0) -> Outcome[Point]:
        if self._space is None:
            return Outcome.fail(Failure.NO_CONFIGURATION_SPACE, "robot has no configuration space")
        vertices = self._space.vertices
        return self.place(vertices[index % len(vertices)])

    def _ready(self) -> Outcome[Point]:
        if self._space is None:
            return Outcome.fail(Failure.NO_CONFIGURATION_SPACE, "robot has no configuration space")
        if self.position is None:
            return Outcome.fail(Failure.INVALID_ORIGIN, "robot has not been placed")
        return Outcome.success(self.position)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def move(self, angle: float) -> Outcome[Point]:
        """Try to travel along a noisy version of ``angle``.

        On success the position becomes the landing point; on failure the
        robot stays where it was.
        """
        ready = self._ready()
        noisy = wrap_angle(self.rotation_model.sample(angle))
        if ready:
            result = self.movement_model(self.position, noisy, self._space)
        else:
            result = ready
        origin = self.position
        if result:
            self.position = result.value
        self.steps += 1
        self._log_move(angle, noisy, origin, result)
        return result

    def shoot_ray(self, angle: float) -> Outcome[Point]:
        """Noiseless landing point for ``angle``; the robot does not move."""
        ready = self._ready()
        if not ready:
            return ready
        return self.movement_model(self.position, angle, self._space)

    def generate_stadium(self, angle: float) -> Outcome[Polygon]:
        """Area swept by the robot body travelling to the noiseless landing point."""
        target = self.shoot_ray(angle)
        if not target:
            return Outcome.fail(target.failure, target.detail)
        return Outcome.success(LineString([self.position, target.value]).buffer(self.radius))

    def generate_ccr(self, angle: float, samples: int = 16) -> Outcome[Polygon]:
        """Cone of candidate reach: every place a noisy move along ``angle`` can land.

        Headings are sampled evenly across the rotation model's envelope;
        headings that point out of the space are skipped.
        """
        ready = self._ready()
        if not ready:
            return Outcome.fail(ready.failure, ready.detail)
        lo = self.rotation_model.min_deviation(angle)
        hi = self.rotation_model.max_deviation(angle)
        samples = max(samples, 2)
        landings: List[Point] = []
        for i in range(samples):
            heading = lo + (hi - lo) * i / (samples - 1)
            hit = self.movement_model(self.position, heading, self._space)
            if hit:
                landings.append(hit.value)
        if len(landings) < 2:
            return Outcome.fail(Failure.NO_INTERSECTION, "fewer than two reachable landing points")
        return Outcome.success(Polygon([self.position] + landings))

    # ------------------------------------------------------------------
    # Telemetry / rendering
    # ------------------------------------------------------------------
    def _log_move(self, heading: float, noisy: float, origin: Optional[Point], result: Outcome[Point]) -> None:
        if self.logger is None:
            return
        self.logger.log_step(
            {
                "step": self.steps,
                "heading": heading,
                "noisy_heading": noisy,
                "origin": list(origin) if origin is not None else None,
                "target": list(result.value) if result else None,
                "moved": result.ok,
                "failure": result.failure.value if result.failure is not None else None,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize robot state for logging/telemetry."""
        x, y = self.position if self.position is not None else (math.nan, math.nan)
        return {
            "x": x,
            "y": y,
            "radius": self.radius,
            "max_rotation_error": self.rotation_model.max_rotation_error,
            "steps": self.steps,
        }

    def render(self, scene) -> None:
        if self._space is not None:
            self._space.render(scene)
        if self.position is not None:
            scene.draw_disk(self.position, self.radius, scene.theme["robot_fill"], scene.theme["robot_outline"])
