"""
Top-level package for the bouncing blind-robot simulator.

Components:
- geometry_utils: angle/vector/polygon helpers and intersection routines
- outcome: result type and failure reasons for fallible operations
- boundary: line/arc edges and the BoundaryGeometry query structure
- builder: erosion of a wall by the robot radius (configuration spaces)
- world: WallSpace, map loading and configuration-space construction
- models: rotation noise and the linear movement query
- robot: the robot itself (placement, move, ray shooting, swept regions)
- render: pygame-based visualization
- config: YAML-backed configuration dataclasses
"""

from .boundary import ArcEdge, BoundaryGeometry, LineEdge
from .builder import ErosionStrategy, erode
from .config import GeometryConfig, RenderConfig, RobotConfig, SimConfig, load_config
from .geometry_utils import Orientation
from .models import LinearMovementModel, LinearPath, MaximumRotationModel, RotationModel
from .outcome import BurstError, Failure, Outcome, OutcomeError
from .robot import Robot
from .world import WallSpace

__all__ = [
    "ArcEdge",
    "BoundaryGeometry",
    "LineEdge",
    "ErosionStrategy",
    "erode",
    "GeometryConfig",
    "RenderConfig",
    "RobotConfig",
    "SimConfig",
    "load_config",
    "Orientation",
    "LinearMovementModel",
    "LinearPath",
    "MaximumRotationModel",
    "RotationModel",
    "BurstError",
    "Failure",
    "Outcome",
    "OutcomeError",
    "Robot",
    "WallSpace",
]
