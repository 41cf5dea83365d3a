from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING
import json
import os

from .boundary import BoundaryGeometry
from .builder import ErosionStrategy, erode
from .config import DEFAULT_GEOMETRY, GeometryConfig
from .geometry_utils import Orientation, Point
from .outcome import Outcome

if TYPE_CHECKING:
    from .robot import Robot

MAPS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "maps")


class WallSpace:
    """Polygonal room the robot lives in.

    Parameters
    ----------
    boundary : BoundaryGeometry
        Validated wall boundary, kept in the vertex order it was given in.
    strategy : ErosionStrategy, optional
        How configuration spaces are derived from the wall. Defaults to
        the ``erosion_strategy`` of the boundary settings.
    name : str
        Label used for rendering and telemetry.

    Use ``WallSpace.create`` (or the map loaders) rather than the
    constructor: they validate the points first.
    """

    def __init__(
        self,
        boundary: BoundaryGeometry,
        strategy: Optional[ErosionStrategy] = None,
        name: str = "wall",
    ) -> None:
        self.boundary = boundary
        if strategy is None:
            strategy = boundary.settings.erosion_strategy
        self.strategy = ErosionStrategy(strategy)
        self.name = name

    # ------------------------------------------------------------------
    # Construction / map loading
    # ------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        points: Sequence[Point],
        strategy: Optional[ErosionStrategy] = None,
        settings: Optional[GeometryConfig] = None,
        name: str = "wall",
    ) -> Outcome["WallSpace"]:
        """Validate ``points`` as a simple polygon and wrap it as a wall.

        Fails with DEGENERATE_BOUNDARY for fewer than 3 points, zero area
        or a self-intersecting ring.
        """
        boundary = BoundaryGeometry.from_points(points, settings or DEFAULT_GEOMETRY)
        if not boundary:
            return Outcome.fail(boundary.failure, boundary.detail)
        return Outcome.success(cls(boundary.value, strategy=strategy, name=name))

    @classmethod
    def from_map_dict(
        cls,
        data: Dict[str, Any],
        strategy: Optional[ErosionStrategy] = None,
        settings: Optional[GeometryConfig] = None,
    ) -> Outcome["WallSpace"]:
        """Create a wall from a dict of the form ``{"name": ..., "points": [[x, y], ...]}``."""
        points = [(float(p[0]), float(p[1])) for p in data["points"]]
        return cls.create(points, strategy=strategy, settings=settings, name=str(data.get("name", "wall")))

    @classmethod
    def from_map_file(
        cls,
        path: str,
        strategy: Optional[ErosionStrategy] = None,
        settings: Optional[GeometryConfig] = None,
    ) -> Outcome["WallSpace"]:
        """Create a wall from a JSON map file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_map_dict(data, strategy=strategy, settings=settings)

    @classmethod
    def from_named_map(
        cls,
        name: str,
        strategy: Optional[ErosionStrategy] = None,
        settings: Optional[GeometryConfig] = None,
    ) -> Outcome["WallSpace"]:
        """Load one of the maps bundled in ``burst_sim/maps``."""
        return cls.from_map_file(os.path.join(MAPS_DIR, f"{name}.json"), strategy=strategy, settings=settings)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the wall to the map file layout."""
        return {"name": self.name, "points": [[x, y] for x, y in self.points]}

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def points(self) -> List[Point]:
        return self.boundary.vertices

    @property
    def orientation(self) -> Orientation:
        return self.boundary.orientation

    @property
    def settings(self) -> GeometryConfig:
        return self.boundary.settings

    # ------------------------------------------------------------------
    # Configuration spaces
    # ------------------------------------------------------------------
    def construct_configuration_space(self, radius: float) -> Outcome[BoundaryGeometry]:
        """Region reachable by the centre of a disk robot of the given radius."""
        return erode(self.points, self.orientation, radius, self.strategy, self.settings)

    def generate_configuration_space(self, robot: "Robot") -> Outcome[None]:
        """Build the configuration space for ``robot`` and hand it over.

        The robot is left untouched on failure.
        """
        space = self.construct_configuration_space(robot.radius)
        if not space:
            return Outcome.fail(space.failure, space.detail)
        robot.set_configuration_space(space.value)
        return Outcome.success(None)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, scene) -> None:
        scene.draw_filled_polygon(self.points, scene.theme["wall_fill"])
        self.boundary.render(scene, color=scene.theme["wall_edge"], width=3)
