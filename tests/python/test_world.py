from __future__ import annotations

import math

import pytest
from pygame.math import Vector2
from pytest import approx

from formicary.sim.core.agent import AntState
from formicary.sim.core.config import (
    ColonyConfig,
    ConfigError,
    NestConfig,
    SimulationConfig,
    SnackConfig,
)
from formicary.sim.core.world import World


def run_steps(config: SimulationConfig, steps: int):
    world = World(config)
    history = []
    for _ in range(steps):
        metrics = world.step()
        history.append((metrics.carrying, metrics.snacks, metrics.trails, metrics.snack_value))
    positions = [(round(ant.position.x, 6), round(ant.position.y, 6)) for ant in world.ants]
    return history, positions


def test_deterministic_steps():
    result_a = run_steps(SimulationConfig(seed=1234), 300)
    # recreate config to ensure RNG resets
    result_b = run_steps(SimulationConfig(seed=1234), 300)
    assert result_a == result_b


def test_bootstrap_places_colony_at_nest():
    world = World(SimulationConfig(seed=3))

    assert len(world.ants) == 50
    assert len(world.snacks) == 25
    assert len(world.trails) == 0
    assert world.nest.position == Vector2(400.0, 300.0)
    for ant in world.ants:
        assert ant.position == world.nest.position
        assert ant.position is not world.nest.position
        assert ant.velocity.length() == approx(1.0)
        assert ant.state is AntState.SEARCHING
        assert ant.speed == approx(25.0)
        assert ant.sensor_range == approx(20.0)
    for snack in world.snacks:
        assert 0 <= snack.position.x <= 800 and 0 <= snack.position.y <= 600
        assert 1 <= snack.value <= 25


def test_nest_position_can_be_configured():
    world = World(SimulationConfig(nest=NestConfig(position=(10.0, 20.0))))
    assert world.nest.position == Vector2(10.0, 20.0)
    assert all(ant.position == Vector2(10.0, 20.0) for ant in world.ants)


def test_zero_dt_tick_moves_nothing():
    world = World(SimulationConfig(seed=11))
    for _ in range(120):
        world.step()
    world.trails.deposit(Vector2(123.0, 45.0))
    positions = [Vector2(ant.position) for ant in world.ants]
    existing = list(world.trails)
    lifetimes = [trail.lifetime for trail in existing]
    fps = world.fps

    metrics = world.advance(0.0)

    assert [ant.position for ant in world.ants] == positions
    assert [trail.lifetime for trail in existing] == lifetimes
    assert all(trail in list(world.trails) for trail in existing)
    assert world.fps == fps
    assert metrics.fps == fps
    assert metrics.dt == 0.0


def test_negative_dt_is_rejected():
    world = World(SimulationConfig(seed=1))
    with pytest.raises(ValueError):
        world.advance(-0.01)


@pytest.mark.parametrize("dt", [float("nan"), float("inf")])
def test_non_finite_dt_is_rejected(dt):
    world = World(SimulationConfig(seed=1))
    positions = [Vector2(ant.position) for ant in world.ants]
    with pytest.raises(ValueError):
        world.advance(dt)
    assert world.elapsed == 0.0
    assert world.tick == 0
    assert [ant.position for ant in world.ants] == positions


def test_subnormal_dt_is_a_valid_tick():
    world = World(SimulationConfig(seed=1))
    metrics = world.advance(1e-310)
    assert metrics.tick == 0
    assert world.fps == approx(60.0)
    assert math.isfinite(world.elapsed)


def test_single_ant_end_to_end_pickup():
    config = SimulationConfig(
        colony=ColonyConfig(ant_count=0),
        snacks=SnackConfig(target_count=0),
    )
    world = World(config)
    world.snacks.spawn_at(Vector2(500.0, 300.0), value=1)
    ant = world.add_ant(Vector2(500.0, 300.0), Vector2(0.0, 1.0))

    first = world.advance(0.0)
    assert first.pickups == 1
    assert first.snacks_depleted == 1
    assert len(world.snacks) == 0
    assert ant.state is AntState.CARRYING
    assert ant.position == Vector2(500.0, 300.0)

    second = world.advance(0.1)
    assert len(world.snacks) == 0
    assert ant.state is AntState.CARRYING
    assert ant.velocity.x == approx(-1.0)
    assert ant.velocity.y == approx(0.0, abs=1e-12)
    assert ant.position.x == approx(497.5)
    assert second.trails_laid == 1
    assert second.carrying == 1


def test_carrier_walks_home_and_drops_food():
    config = SimulationConfig(
        colony=ColonyConfig(ant_count=0),
        snacks=SnackConfig(target_count=0),
    )
    world = World(config)
    world.snacks.spawn_at(Vector2(460.0, 300.0), value=2)
    ant = world.add_ant(Vector2(460.0, 300.0), Vector2(0.0, 1.0))

    deliveries = 0
    for _ in range(200):
        deliveries += world.advance(0.05).deliveries
        if deliveries:
            break

    assert deliveries == 1
    assert ant.state is AntState.SEARCHING
    assert ant.velocity.length() == approx(1.0)
    assert len(world.trails) > 0
    for trail in world.trails:
        assert trail.nest_distance == approx(math.hypot(trail.position.x - 400.0, trail.position.y - 300.0))


def test_snack_population_refills_one_per_tick():
    config = SimulationConfig(seed=21, colony=ColonyConfig(ant_count=0))
    world = World(config)
    for snack in list(world.snacks)[:3]:
        snack.value = 0

    counts = [len(world.snacks)]
    for _ in range(4):
        metrics = world.step()
        counts.append(metrics.snacks)

    assert counts == [25, 23, 24, 25, 25]


def test_trails_expire_after_lifetime():
    config = SimulationConfig(colony=ColonyConfig(ant_count=0), snacks=SnackConfig(target_count=0))
    world = World(config)
    world.trails.deposit(Vector2(100.0, 100.0))

    world.advance(4.0)
    assert len(world.trails) == 1
    metrics = world.advance(6.0)
    assert len(world.trails) == 0
    assert metrics.trails_expired == 1


def test_empty_world_is_a_valid_steady_state():
    config = SimulationConfig(colony=ColonyConfig(ant_count=0), snacks=SnackConfig(target_count=0))
    world = World(config)
    metrics = world.step()
    assert metrics.ants == 0
    assert metrics.snacks == 0
    assert metrics.trails == 0


def test_frame_rate_estimate_follows_dt():
    config = SimulationConfig(colony=ColonyConfig(ant_count=0), snacks=SnackConfig(target_count=0))
    world = World(config)
    assert world.fps == approx(60.0)
    world.advance(0.05)
    assert world.fps == approx(40.0)
    world.advance(0.0)
    assert world.fps == approx(40.0)


def test_advance_frame_uses_host_timestamps():
    config = SimulationConfig(colony=ColonyConfig(ant_count=0), snacks=SnackConfig(target_count=0))
    world = World(config)

    assert world.advance_frame(0.0).dt == 0.0
    assert world.advance_frame(250.0).dt == approx(0.25)
    assert world.elapsed == approx(0.25)
    with pytest.raises(ValueError):
        world.advance_frame(100.0)


def test_reset_restores_initial_state():
    world = World(SimulationConfig(seed=5))
    initial = [(snack.position.x, snack.position.y, snack.value) for snack in world.snacks]
    headings = [Vector2(ant.velocity) for ant in world.ants]
    for _ in range(200):
        world.step()

    world.reset()

    assert world.tick == 0
    assert world.elapsed == 0.0
    assert world.metrics is None
    assert len(world.trails) == 0
    assert [(snack.position.x, snack.position.y, snack.value) for snack in world.snacks] == initial
    assert [ant.velocity for ant in world.ants] == headings


def test_invalid_config_fails_at_construction():
    with pytest.raises(ConfigError):
        World(SimulationConfig(colony=ColonyConfig(sensor_range=-1.0)))
    with pytest.raises(ConfigError):
        World(SimulationConfig(snacks=SnackConfig(target_count=-5)))
    with pytest.raises(ConfigError):
        World(SimulationConfig(time_step=-0.1))


def test_snapshot_exposes_render_attributes():
    world = World(SimulationConfig(seed=7, time_step=0.5))
    world.trails.deposit(Vector2(420.0, 300.0))
    world.step()
    snapshot = world.snapshot()

    assert snapshot.tick == 1
    assert snapshot.elapsed == approx(0.5)
    assert snapshot.world.width == approx(800.0)
    assert snapshot.world.height == approx(600.0)
    assert snapshot.metadata.sim_dt == approx(0.5)
    assert snapshot.metadata.tick_rate == approx(2.0)
    assert snapshot.metadata.seed == 7
    assert snapshot.metrics.ants == 50
    assert snapshot.nest == {"x": 400.0, "y": 300.0, "size": 10.0, "color": "nest"}

    ant = snapshot.ants[0]
    for key in ["id", "x", "y", "vx", "vy", "size", "color", "carrying"]:
        assert key in ant
    assert ant["color"] == "ant"
    assert ant["size"] == approx(3.0)
    assert len(snapshot.snacks) == len(world.snacks)
    assert {"x", "y", "size", "color", "value"} <= set(snapshot.snacks[0])
    assert {"x", "y", "size", "color", "lifetime", "nest_distance"} <= set(snapshot.trails[0])


def test_snapshot_before_first_tick_has_idle_metrics():
    world = World(SimulationConfig(seed=8))
    snapshot = world.snapshot()
    assert snapshot.tick == 0
    assert snapshot.metrics.ants == 50
    assert snapshot.metrics.pickups == 0


@pytest.mark.slow
def test_long_run_colony_forages():
    world = World(SimulationConfig(seed=42))
    pickups = 0
    deliveries = 0
    for _ in range(6000):
        metrics = world.step()
        pickups += metrics.pickups
        deliveries += metrics.deliveries
        assert metrics.ants == 50
        assert all(trail.lifetime > 0.0 for trail in world.trails)
        assert all(snack.value > 0 for snack in world.snacks)

    assert pickups > 0
    assert deliveries > 0
