from __future__ import annotations

import json
import os

import pytest

from burst_sim.builder import ErosionStrategy
from burst_sim.geometry_utils import Orientation
from burst_sim.outcome import Failure
from burst_sim.world import WallSpace

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
ARROWHEAD = [(0.0, 20.0), (-20.0, -20.0), (0.0, 0.0), (20.0, -20.0)]


@pytest.mark.parametrize(
    "points",
    [
        [(0.0, 0.0), (5.0, 5.0), (10.0, 10.0)],
        [(1.0, 1.0)],
        [(0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0), (0.0, 0.0), (0.0, 0.0)],
        [(0.0, 0.0), (10.0, 0.0), (10.0, 0.0), (0.0, 0.0)],
        [(0.0, 0.0), (10.0, 10.0), (10.0, 0.0), (0.0, 10.0)],
        [(0.0, 0.0), (10.0, 10.0), (0.0, 10.0), (10.0, 0.0)],
    ],
)
def test_invalid_walls_are_rejected(points) -> None:
    result = WallSpace.create(points)
    assert not result
    assert result.failure == Failure.DEGENERATE_BOUNDARY


def test_valid_walls_keep_their_order() -> None:
    square = WallSpace.create(SQUARE).unwrap()
    assert square.points == SQUARE
    assert square.orientation == Orientation.COUNTERCLOCKWISE

    clockwise = WallSpace.create(SQUARE[::-1]).unwrap()
    assert clockwise.orientation == Orientation.CLOCKWISE

    arrow = WallSpace.create(ARROWHEAD).unwrap()
    assert len(arrow.boundary) == 4


def test_map_file_round_trip(tmp_path) -> None:
    path = os.path.join(tmp_path, "room.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"name": "room", "points": [list(p) for p in SQUARE]}, f)
    wall = WallSpace.from_map_file(path, strategy=ErosionStrategy.OFFSET).unwrap()
    assert wall.name == "room"
    assert wall.strategy == ErosionStrategy.OFFSET
    assert wall.to_dict() == {"name": "room", "points": [list(p) for p in SQUARE]}


def test_bundled_maps_load() -> None:
    for name in ("square", "arrowhead", "l_room"):
        assert WallSpace.from_named_map(name)


def test_wall_boundary_membership() -> None:
    wall = WallSpace.create(SQUARE).unwrap()
    assert wall.boundary.contains_on_boundary((5.0, 0.0))
    assert wall.boundary.contains_on_boundary((10.0, 10.0))
    assert not wall.boundary.contains_on_boundary((5.0, 5.0))
    assert not wall.boundary.contains_on_boundary((15.0, 5.0))
