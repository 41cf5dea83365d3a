from __future__ import annotations

import os

import pytest

from burst_sim.builder import ErosionStrategy
from burst_sim.boundary import LineEdge
from burst_sim.config import GeometryConfig, SimConfig, load_config
from burst_sim.world import MAPS_DIR, WallSpace

CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs", "sim.yaml")


def test_load_repo_config() -> None:
    cfg = load_config(CONFIG_PATH)
    assert cfg.geometry.tolerance == pytest.approx(1e-9)
    assert cfg.geometry.erosion_strategy == "disk"
    assert cfg.robot.radius == pytest.approx(1.0)
    assert cfg.log_path == "telemetry_logs/bounce.jsonl"
    assert os.path.exists(os.path.join(MAPS_DIR, f"{cfg.default_map}.json"))


def test_defaults_from_empty_dict() -> None:
    cfg = SimConfig.from_dict({})
    assert cfg.geometry.heading_margin == pytest.approx(1e-6)
    assert cfg.default_map == "square"
    assert cfg.log_path is None


def test_unknown_keys_and_strategies_are_rejected() -> None:
    with pytest.raises(ValueError):
        SimConfig.from_dict({"geometry": {"erosion_strategy": "mitre"}})
    with pytest.raises(TypeError):
        SimConfig.from_dict({"robot": {"diameter": 2.0}})


def test_config_drives_world_construction() -> None:
    cfg = load_config(CONFIG_PATH)
    wall = WallSpace.from_named_map(
        cfg.default_map,
        strategy=ErosionStrategy(cfg.geometry.erosion_strategy),
        settings=cfg.geometry,
    ).unwrap()
    assert wall.settings is cfg.geometry
    assert wall.construct_configuration_space(cfg.robot.radius)


def test_wall_strategy_follows_settings() -> None:
    square = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    settings = GeometryConfig(erosion_strategy="offset")
    wall = WallSpace.create(square, settings=settings).unwrap()
    assert wall.strategy == ErosionStrategy.OFFSET
    space = wall.construct_configuration_space(1.0).unwrap()
    assert space.vertices == [(1.0, 1.0), (9.0, 1.0), (9.0, 9.0), (1.0, 9.0)]
    assert all(isinstance(e, LineEdge) for e in space.edges)

    assert WallSpace.create(square).unwrap().strategy == ErosionStrategy.DISK
    override = WallSpace.create(square, strategy=ErosionStrategy.DISK, settings=settings).unwrap()
    assert override.strategy == ErosionStrategy.DISK
