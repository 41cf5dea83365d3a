from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml


@dataclass
class GeometryConfig:
    """Numerical settings shared by boundaries, erosion and movement queries.

    Attributes
    ----------
    tolerance : float
        Distance below which two points or a point and an edge coincide.
    heading_margin : float
        Slack on the dot product between a heading and an inward normal.
    erosion_strategy : str
        ``"disk"`` (Minkowski erosion with arcs) or ``"offset"`` (per-edge
        offset and reconnect).
    quad_segs : int
        Segments per quarter circle used when buffering with round joins.
    arc_tolerance : float
        Distance tolerance used to recognise buffered vertices as arc points.
    sliver_area : float
        Eroded regions with area at or below this are discarded.
    """

    tolerance: float = 1e-9
    heading_margin: float = 1e-6
    erosion_strategy: str = "disk"
    quad_segs: int = 16
    arc_tolerance: float = 1e-7
    sliver_area: float = 1e-9


@dataclass
class RobotConfig:
    radius: float = 1.0
    max_rotation_error: float = 0.1
    seed: Optional[int] = None


@dataclass
class RenderConfig:
    window_width: int = 800
    window_height: int = 800
    fps: int = 10
    show_trail: bool = True
    trail_max_length: int = 500


@dataclass
class SimConfig:
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    robot: RobotConfig = field(default_factory=RobotConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    log_path: Optional[str] = None
    default_map: str = "square"
    steps: int = 100
    seed: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimConfig":
        """Build a config from the nested dict layout of ``configs/sim.yaml``."""
        geometry_cfg = data.get("geometry", {})
        robot_cfg = data.get("robot", {})
        render_cfg = data.get("render", {})
        telemetry_cfg = data.get("telemetry", {})
        maps_cfg = data.get("maps", {})
        sim_cfg = data.get("sim", {})

        geometry = GeometryConfig(**geometry_cfg)
        if geometry.erosion_strategy not in ("disk", "offset"):
            raise ValueError(f"Unknown erosion strategy '{geometry.erosion_strategy}'")

        return cls(
            geometry=geometry,
            robot=RobotConfig(**robot_cfg),
            render=RenderConfig(**render_cfg),
            log_path=telemetry_cfg.get("log_path"),
            default_map=str(maps_cfg.get("default_map", "square")),
            steps=int(sim_cfg.get("steps", 100)),
            seed=int(data.get("seed", 0)),
        )


DEFAULT_GEOMETRY = GeometryConfig()


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str) -> SimConfig:
    """Load a SimConfig from a YAML file."""
    return SimConfig.from_dict(load_yaml(path))
