from __future__ import annotations

import argparse
import math
import os
import random
import sys
from pathlib import Path

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from burst_sim.config import load_config
from burst_sim.robot import Robot
from burst_sim.world import MAPS_DIR, WallSpace
from telemetry.logger import TelemetryLogger


def choose_heading(robot: Robot, rng: random.Random) -> float:
    """Random heading within +-90 degrees of the inward normal at the robot's position."""
    space = robot.configuration_space
    edge_index = space.locate_edges(robot.position)[0]
    nx, ny = space.inward_normal(edge_index, robot.position)
    return math.atan2(ny, nx) + rng.uniform(-0.49 * math.pi, 0.49 * math.pi)


def main() -> None:
    parser = argparse.ArgumentParser(description="Bounce a blind robot around a polygonal room.")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/sim.yaml",
        help="Path to sim YAML config.",
    )
    parser.add_argument("--map", type=str, default=None, help="JSON map file (overrides maps.default_map).")
    parser.add_argument("--steps", type=int, default=None, help="Number of move attempts.")
    parser.add_argument("--render", action="store_true", help="Show a pygame window.")
    args = parser.parse_args()

    cfg = load_config(args.config)
    steps = args.steps if args.steps is not None else cfg.steps
    map_path = args.map or os.path.join(MAPS_DIR, f"{cfg.default_map}.json")

    wall = WallSpace.from_map_file(map_path, settings=cfg.geometry).unwrap()

    logger = TelemetryLogger(cfg.log_path, truncate=True) if cfg.log_path else None
    robot = Robot(
        radius=cfg.robot.radius,
        max_rotation_error=cfg.robot.max_rotation_error,
        rotation_seed=cfg.robot.seed,
        logger=logger,
    )
    wall.generate_configuration_space(robot).unwrap()
    robot.place_at_vertex(0).unwrap()
    space = robot.configuration_space
    print(
        f"Map '{wall.name}': {len(space)} configuration-space edges ({space.kind}), "
        f"starting at ({robot.position[0]:.3f}, {robot.position[1]:.3f})"
    )

    renderer = None
    if args.render:
        from burst_sim.render import PygameRenderer
        import pygame

        renderer = PygameRenderer(
            wall=wall,
            window_width=cfg.render.window_width,
            window_height=cfg.render.window_height,
            show_trail=cfg.render.show_trail,
            trail_max_length=cfg.render.trail_max_length,
        )

    rng = random.Random(cfg.seed)
    moved = 0
    try:
        for step in range(steps):
            result = robot.move(choose_heading(robot, rng))
            if result:
                moved += 1
            if renderer is not None:
                if any(event.type == pygame.QUIT for event in pygame.event.get()):
                    break
                fps = renderer.tick(cfg.render.fps)
                renderer.draw(robot, step=step, fps=fps)
    finally:
        if renderer is not None:
            renderer.close()
        if logger is not None:
            logger.close()

    print(f"Done: {moved}/{robot.steps} moves succeeded, final position {robot.position}")
    if cfg.log_path:
        print(f"Telemetry written to {cfg.log_path}")


if __name__ == "__main__":
    main()
