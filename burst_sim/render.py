from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from .geometry_utils import Point, lerp

Color = Tuple[int, int, int]

# Modern dark theme palette
THEME: Dict[str, Color] = {
    "bg": (18, 22, 32),
    "wall_fill": (45, 52, 70),
    "wall_edge": (85, 95, 120),
    "space_edge": (0, 200, 160),
    "robot_fill": (100, 220, 255),
    "robot_outline": (40, 140, 200),
    "stadium": (255, 180, 100),
    "trail_start": (60, 160, 200),
    "trail_end": (100, 220, 255),
    "hud_bg": (28, 34, 48),
    "hud_border": (55, 65, 88),
    "hud_text": (200, 220, 255),
}


class Scene:
    """Drawing target for walls, configuration spaces and robots.

    Wraps a pygame surface together with a world-to-screen transform that
    fits ``world_bounds`` (xmin, ymin, xmax, ymax) into the surface with a
    margin. World +y is up; screen y increases downward.
    """

    def __init__(
        self,
        surface: pygame.Surface,
        world_bounds: Tuple[float, float, float, float],
        margin: int = 20,
        theme: Optional[Dict[str, Color]] = None,
    ) -> None:
        self.surface = surface
        self.theme = dict(THEME if theme is None else theme)
        self.margin = margin
        xmin, ymin, xmax, ymax = world_bounds
        width, height = surface.get_size()
        span = max(xmax - xmin, ymax - ymin, 1e-9)
        self.scale = min(width - 2 * margin, height - 2 * margin) / span
        self.origin = (xmin, ymin)
        self.height = height

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------
    def _world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        sx = int(self.margin + (x - self.origin[0]) * self.scale)
        sy = int(self.height - self.margin - (y - self.origin[1]) * self.scale)
        return sx, sy

    def _meters_to_pixels(self, r: float) -> int:
        return int(r * self.scale)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
    def clear(self) -> None:
        self.surface.fill(self.theme["bg"])

    def draw_closed_curve(self, points: Sequence[Point], color: Color, width: int = 2) -> None:
        if len(points) < 2:
            return
        pts = [self._world_to_screen(x, y) for x, y in points]
        pygame.draw.lines(self.surface, color, True, pts, width)

    def draw_filled_polygon(self, points: Sequence[Point], color: Color) -> None:
        if len(points) < 3:
            return
        pygame.draw.polygon(self.surface, color, [self._world_to_screen(x, y) for x, y in points])

    def draw_shape(self, polygon, color: Color, width: int = 1) -> None:
        """Outline of a Shapely polygon (stadium, cone of reach)."""
        if polygon.is_empty:
            return
        self.draw_closed_curve(list(polygon.exterior.coords)[:-1], color, width)

    def draw_disk(self, center: Point, radius: float, fill: Color, outline: Color) -> None:
        c = self._world_to_screen(*center)
        radius_px = max(2, self._meters_to_pixels(radius))
        pygame.draw.circle(self.surface, fill, c, radius_px, 0)
        pygame.draw.circle(self.surface, outline, c, radius_px, 2)

    def draw_trail(self, trail: Sequence[Point]) -> None:
        """Polyline with a colour gradient from old to new."""
        if len(trail) < 2:
            return
        pts = [self._world_to_screen(x, y) for x, y in trail]
        start, end = self.theme["trail_start"], self.theme["trail_end"]
        n = len(pts) - 1
        for i in range(n):
            t = (i + 1) / n
            color = tuple(int(lerp(start[k], end[k], t)) for k in range(3))
            w = 2 if i == n - 1 else 1
            pygame.draw.line(self.surface, color, pts[i], pts[i + 1], w)


class PygameRenderer:
    """Window showing the wall, the robot's configuration space and its bounce trail."""

    def __init__(
        self,
        wall,
        window_width: int,
        window_height: int,
        show_trail: bool = True,
        trail_max_length: int = 500,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Bouncing Robot Simulation")
        self.screen = pygame.display.set_mode((window_width, window_height))
        self.clock = pygame.time.Clock()

        self.wall = wall
        self.scene = Scene(self.screen, wall.boundary.bounds)
        self.show_trail = show_trail
        self.trail_max_length = trail_max_length
        self.trail: List[Point] = []

    def draw(self, robot, step: int = 0, fps: float = 0.0) -> None:
        """Render one frame."""
        self.scene.clear()
        self.wall.render(self.scene)

        if self.show_trail and robot.position is not None:
            if not self.trail or self.trail[-1] != robot.position:
                self.trail.append(robot.position)
            if len(self.trail) > self.trail_max_length:
                self.trail = self.trail[-self.trail_max_length :]
            self.scene.draw_trail(self.trail)

        robot.render(self.scene)
        self._draw_hud(step, fps)
        pygame.display.flip()

    def _draw_hud(self, step: int, fps: float) -> None:
        pad = 10
        font = pygame.font.SysFont("monospace", 13)
        text = f"  step={step}   FPS={fps:.1f}  "
        surf = font.render(text, True, THEME["hud_text"])
        r = surf.get_rect(topleft=(pad, pad))
        panel = r.inflate(pad, pad)
        pygame.draw.rect(self.screen, THEME["hud_bg"], panel)
        pygame.draw.rect(self.screen, THEME["hud_border"], panel, 1)
        self.screen.blit(surf, (panel.x + 4, panel.y + 4))

    def tick(self, target_fps: int) -> float:
        """Cap frame rate and return achieved FPS."""
        fps = self.clock.get_fps()
        self.clock.tick(target_fps)
        return fps

    def close(self) -> None:
        pygame.quit()
